"""
traitforge/cli.py
Command-line interface for traitforge

Usage:
    python -m traitforge generate --seed 0x3f...e1
    python -m traitforge batch --count 100 --start 1 --workers 8
    python -m traitforge list-patterns
    python -m traitforge list-themes
    python -m traitforge validate-palette "#000000" "#FFFFFF" "#FF0000" "#00FF00"
    python -m traitforge distribution --draws 100000
    python -m traitforge --config bundle.json generate --seed 42
    python -m traitforge --log-file run.log batch --count 10
"""

import argparse
import json
import sys
from collections import Counter
from pathlib import Path
from typing import Optional

from . import __version__
from .config import (
    ENGINE_VERSION,
    STREAM_PATTERN,
    STREAM_THEME,
    TRAIT_SCHEMA_VERSION,
    VALIDATION_CONFIG,
)
from .errors import ConfigurationError, TraitForgeError
from .logger import LogLevel, logger, set_log_level


def _parse_seed(text: str):
    """64-digit or 0x-prefixed seeds are hex; other decimal strings are ints."""
    text = text.strip()
    if len(text) == 64 or text.lower().startswith("0x"):
        return text
    if text.isdigit():
        return int(text)
    return text


def _load_registry(args: argparse.Namespace):
    from .bundle import registry_from_json
    from .registry import default_registry

    if not args.config:
        return default_registry()

    path = Path(args.config)
    if not path.exists():
        raise ConfigurationError(f"config file not found: {path}")
    logger.info(f"Loading bundle {path}", component="CONFIG")
    return registry_from_json(path.read_text())


def _print_record(record, as_json: bool) -> None:
    if as_json:
        print(json.dumps(record.to_dict(), indent=2))
        return
    print(f"Seed:       {record.seed}")
    print(f"Pattern:    {record.pattern_name} ({record.pattern_id})")
    print(f"Theme:      {record.theme_name}")
    print(f"Rarity:     {record.rarity}")
    print(f"Complexity: {record.complexity.value} ({record.complexity.bucket.value})")
    print(f"Colors:     {' '.join(record.colors)}")
    print("Parameters:")
    for name, value in record.parameters.items():
        print(f"  {name}: {value}")
    v = record.validation
    print("Validation:")
    print(f"  contrast:      {v.contrast:.1f}")
    print(f"  harmony:       {v.harmony:.1f}")
    print(f"  accessibility: {v.accessibility:.1f}")
    print(f"  balance:       {v.balance:.1f}")
    print(f"  overall:       {v.overall:.1f}")


def cmd_generate(args: argparse.Namespace) -> int:
    """Assemble the trait record for one seed."""
    from .assemble import TraitAssembler

    registry = _load_registry(args)
    record = TraitAssembler().assemble(_parse_seed(args.seed), registry)

    if args.metadata is not None:
        print(json.dumps(record.to_metadata(args.metadata), indent=2))
        return 0

    _print_record(record, args.json)
    return 0


def cmd_batch(args: argparse.Namespace) -> int:
    """Assemble a range of consecutive integer seeds."""
    from .assemble import assemble_batch, seed_range

    registry = _load_registry(args)
    outcomes = assemble_batch(seed_range(args.start, args.count), registry, max_workers=args.workers)

    failed = 0
    for o in outcomes:
        if not o.ok:
            failed += 1
            logger.warning(f"seed {o.seed} failed", component="ASSEMBLE", details=str(o.error))
    logger.info(f"{len(outcomes) - failed}/{len(outcomes)} assembled", component="ASSEMBLE")

    if args.json:
        rows = []
        for o in outcomes:
            if o.ok:
                rows.append(o.record.to_dict())
            else:
                rows.append({"seed": o.seed, "error": str(o.error)})
        print(json.dumps(rows, indent=2))
    else:
        for o in outcomes:
            if o.ok:
                r = o.record
                print(f"{r.seed[:12]}  {r.pattern_id:<22} {r.theme_name:<11} "
                      f"{r.rarity:<9} {r.complexity.value:>3} {r.complexity.bucket.value}")
            else:
                print(f"{str(o.seed)[:12]}  ERROR: {o.error}")
        print()
        print(f"{len(outcomes) - failed}/{len(outcomes)} assembled")

    return 1 if failed else 0


def cmd_list_patterns(args: argparse.Namespace) -> int:
    """List pattern archetypes with their rarity and parameters."""
    registry = _load_registry(args)
    table = registry.pattern_table

    print("Pattern archetypes:")
    print()

    # Group by category
    by_category = {}
    for config in registry.patterns:
        by_category.setdefault(config.category or "uncategorized", []).append(config)

    for category, configs in sorted(by_category.items()):
        print(f"[{category}]")
        for c in configs:
            p = table.probability(c.pattern_id)
            print(f"  {c.pattern_id}")
            print(f"    Display: {c.display_name}")
            print(f"    Odds: {float(p) * 100:.1f}%")
            print(f"    Params: {', '.join(s.name for s in c.param_specs)}")
        print()

    return 0


def cmd_list_themes(args: argparse.Namespace) -> int:
    """List themes grouped by rarity class."""
    registry = _load_registry(args)
    tiers = registry.theme_table

    for class_key in tiers.classes.keys():
        class_p = tiers.classes.probability(class_key)
        print(f"[{class_key}] {float(class_p) * 100:.1f}%")
        try:
            members = tiers.members(class_key)
        except KeyError:
            print("  (none)")
            print()
            continue
        for name in members.keys():
            theme = registry.theme(name)
            score = registry.palette_validation(name).overall
            p = tiers.probability(class_key, name)
            print(f"  {name:<11} {float(p) * 100:5.1f}%  {' '.join(theme.colors)}  "
                  f"score {score:.1f}")
        print()

    return 0


def cmd_validate_palette(args: argparse.Namespace) -> int:
    """Score an arbitrary four-color palette."""
    from .harmony import ColorHarmonyValidator

    config = _load_registry(args).validation_config if args.config else VALIDATION_CONFIG
    validator = ColorHarmonyValidator(config)
    analysis = validator.analyze(args.colors)

    if args.json:
        print(json.dumps(analysis.to_dict(), indent=2))
        return 0

    print(f"Palette: {' '.join(analysis.palette.hex)}")
    print()
    c = analysis.contrast
    print(f"Contrast:      {c.score:5.1f}  (avg {c.average:.2f}, min {c.minimum:.2f}, "
          f"max {c.maximum:.2f}, AA {c.aa_compliant}/6, AAA {c.aaa_compliant}/6)")
    h = analysis.harmony
    schemes = ", ".join(h.matched) or "none"
    print(f"Harmony:       {h.score:5.1f}  (schemes: {schemes})")
    a = analysis.accessibility
    passed = [k for k, ok in a.distinguishable.items() if ok]
    print(f"Accessibility: {a.score:5.1f}  (distinguishable: {', '.join(passed) or 'none'})")
    b = analysis.balance
    print(f"Balance:       {b.score:5.1f}  (light {b.has_light}, dark {b.has_dark})")
    print(f"Overall:       {analysis.overall:5.1f}")
    return 0


def cmd_distribution(args: argparse.Namespace) -> int:
    """Compare empirical pattern/theme frequencies to configured odds."""
    from .seeds import DeterministicRNG, seed_hex

    registry = _load_registry(args)
    patterns = Counter()
    themes = Counter()

    for i in range(args.draws):
        rng = DeterministicRNG(seed_hex(args.start + i))
        patterns[registry.pattern_table.select(rng.stream(STREAM_PATTERN))] += 1
        _, theme = registry.theme_table.select(rng.stream(STREAM_THEME))
        themes[theme] += 1

    def report(title, keys, counts, expected):
        print(f"{title}:")
        print(f"  {'key':<22} {'expected':>9} {'observed':>9} {'delta':>7}")
        for key in keys:
            e = float(expected(key)) * 100
            o = counts[key] / args.draws * 100 if args.draws else 0.0
            print(f"  {key:<22} {e:8.2f}% {o:8.2f}% {o - e:+6.2f}")
        print()

    print(f"Draws: {args.draws} (seeds {args.start}..{args.start + args.draws - 1})")
    print()
    table = registry.pattern_table
    report("Patterns", table.keys(), patterns, table.probability)
    tiers = registry.theme_table
    report("Themes", tiers.keys(), themes,
           lambda k: tiers.probability(tiers.class_of(k), k))
    return 0


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="traitforge",
        description="Deterministic trait generation and palette validation",
    )
    parser.add_argument(
        "--version", action="version",
        version=f"%(prog)s {__version__} (engine {ENGINE_VERSION}, schema {TRAIT_SCHEMA_VERSION})"
    )
    parser.add_argument("--config", "-c", type=str, help="JSON configuration bundle")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug logging")
    parser.add_argument("--log-file", type=str, metavar="PATH", help="Also write debug logging to PATH")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # generate command
    gen_parser = subparsers.add_parser("generate", help="Assemble traits for one seed")
    gen_parser.add_argument("--seed", "-s", type=str, required=True,
                            help="Integer or 64-digit hex seed")
    gen_parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")
    gen_parser.add_argument("--metadata", "-m", type=int, metavar="TOKEN_ID",
                            help="Output token metadata for TOKEN_ID")
    gen_parser.set_defaults(func=cmd_generate)

    # batch command
    batch_parser = subparsers.add_parser("batch", help="Assemble consecutive integer seeds")
    batch_parser.add_argument("--count", "-n", type=int, required=True, help="Number of seeds")
    batch_parser.add_argument("--start", "-s", type=int, default=0, help="First seed")
    batch_parser.add_argument("--workers", "-w", type=int, help="Worker threads")
    batch_parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")
    batch_parser.set_defaults(func=cmd_batch)

    # list-patterns command
    patterns_parser = subparsers.add_parser("list-patterns", help="List pattern archetypes")
    patterns_parser.set_defaults(func=cmd_list_patterns)

    # list-themes command
    themes_parser = subparsers.add_parser("list-themes", help="List themes by rarity")
    themes_parser.set_defaults(func=cmd_list_themes)

    # validate-palette command
    palette_parser = subparsers.add_parser("validate-palette", help="Score a 4-color palette")
    palette_parser.add_argument("colors", nargs=4, metavar="HEX", help="Hex color, e.g. #1B2951")
    palette_parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")
    palette_parser.set_defaults(func=cmd_validate_palette)

    # distribution command
    dist_parser = subparsers.add_parser("distribution", help="Empirical vs configured odds")
    dist_parser.add_argument("--draws", "-n", type=int, default=10000, help="Number of seeds")
    dist_parser.add_argument("--start", "-s", type=int, default=0, help="First seed")
    dist_parser.set_defaults(func=cmd_distribution)

    args = parser.parse_args(argv)

    if args.verbose:
        set_log_level(LogLevel.DEBUG)
    if args.log_file:
        logger.enable_file_logging(args.log_file)

    try:
        return args.func(args)
    except TraitForgeError as e:
        logger.error(f"{args.command} failed", component="CLI", details=str(e))
        print(f"ERROR: {e}")
        return 1
    finally:
        if args.log_file:
            logger.disable_file_logging()


if __name__ == "__main__":
    sys.exit(main())
