"""CLI entry point for the ROM filter."""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .. import __version__
from ..core import (
    ApplicationConfig,
    CatalogProjector,
    CatalogSourceError,
    DatReader,
    DatWriter,
    ExplicitLinkGrouper,
    RomListScanner,
    ScoringPolicy,
    SelectionEngine,
    SelectionResult,
    SequentialPrefixGrouper,
    clone_links_from_groups,
)
from ..core.presets import expand_skip_attrs
from ..core.report import (
    format_analysis,
    format_arcade_listing,
    format_attribute_index,
    format_summary,
    write_selection_list,
)


def setup_logging(level: str = "INFO") -> None:
    """
    Set up logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def split_list(value: str) -> list[str]:
    """Split a comma-separated argument, dropping empty items."""
    return [item for item in value.split(",") if item]


def flatten(values: list[list[str]] | None) -> list[str]:
    """Flatten repeated comma-separated arguments."""
    return [item for group in values or [] for item in group]


def build_roms_policy(args: argparse.Namespace) -> ScoringPolicy:
    """Build the scoring policy for flat collections from parsed arguments."""
    presets = [name for name in ("noproto", "nounl", "nomini") if getattr(args, name)]
    policy_args = {
        "exclude_unlisted_countries": args.exclude,
        "skip_attrs": expand_skip_attrs(flatten(args.skip_attr), presets),
        "skip_name_patterns": flatten(args.skip_name),
        "force_include_attrs": flatten(args.force_attr),
        "bios_excluded": args.nobios,
    }
    if args.countries is not None:
        policy_args["country_preference"] = args.countries
    return ScoringPolicy(**policy_args)


def build_arcade_policy(args: argparse.Namespace) -> ScoringPolicy:
    """Build the scoring policy for arcade Dat files from parsed arguments."""
    skip_words = args.skip or []
    return ScoringPolicy(
        country_preference=[],
        require_countries=False,
        re_edition_marker="",
        version_weight=0.0,
        skip_description_patterns=skip_words,
        bios_excluded=True,
        manufacturer_filter=args.manufacturer,
    )


def filter_roms_cli(args: argparse.Namespace) -> SelectionResult:
    """
    Select one ROM per game from a directory or list file.

    Args:
        args: Parsed "roms" arguments

    Returns:
        SelectionResult of the run
    """
    logger = logging.getLogger(__name__)
    config = ApplicationConfig(output_file=args.output, analyze=args.dryrun, log_level=args.log_level)
    policy = build_roms_policy(args)

    entries = RomListScanner().scan(args.input)
    grouper = SequentialPrefixGrouper()
    groups = grouper.group(entries)
    result = SelectionEngine(policy, analysis=config.analyze).select(
        groups, processed_count=len(entries)
    )

    if config.analyze:
        print(format_analysis(result.trace or []), end="")

    print(format_summary(result), end="")

    if config.analyze:
        print(format_attribute_index(result.attribute_index), end="")
    else:
        written = write_selection_list(result.winners, config.output_file)
        print(f"List of filtered ROMs written to {written}")

    logger.info(str(result))
    return result


def filter_arcade_cli(args: argparse.Namespace) -> None:
    """
    Filter an arcade Dat file down to parents and their valid clones.

    Args:
        args: Parsed "arcade" arguments
    """
    config = ApplicationConfig(
        output_file=args.output,
        output_xml=args.xml,
        analyze=args.dryrun,
        print_description=args.print_description,
        log_level=args.log_level,
    )
    policy = build_arcade_policy(args)

    source = DatReader().read(args.romlist)
    grouper = ExplicitLinkGrouper()
    groups = grouper.group(source.entries)
    result = SelectionEngine(policy).select(groups, processed_count=source.game_count)
    catalog = CatalogProjector().project(
        result.winners,
        clone_links_from_groups(groups),
        manufacturer_filter=policy.manufacturer_filter,
    )

    listing = format_arcade_listing(catalog, print_description=config.print_description)
    if config.analyze:
        print(listing, end="")
    else:
        config.output_file.write_text(listing, encoding="utf-8")
        if config.output_xml:
            DatWriter().write(catalog, config.output_xml, source)

    print(f"ROMs in DAT file: {source.game_count}")
    print(str(catalog))
    if policy.skip_description_patterns:
        print(
            f"Skipped {result.vetoed_count} ROMs that matched criteria "
            f"\"{', '.join(policy.skip_description_patterns)}\""
        )
    if not config.analyze:
        print(f"\nCreated file \"{config.output_file}\" with filtered ROM list")


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="roms-filter",
        description="ROMs filter - Select one ROM per game from a ROM collection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Select ROMs from a directory of No-Intro zips
  roms-filter roms -i /path/to/roms

  # Preview the scoring without writing anything
  roms-filter roms -i roms.txt -d

  # Prefer Europe, skip prototypes and unlicensed ROMs
  roms-filter roms -i /path/to/roms -c Europe,World,USA -np -nu

  # Filter an arcade Dat file and write a filtered Dat
  roms-filter arcade fbneo.dat -x fbneo-filtered.dat -pd
        """,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    roms = subparsers.add_parser(
        "roms",
        help="Select one ROM per game from zipped ROMs or a list of names",
        description=(
            "Selects one ROM from each group of ROMs with the same name using, in order: "
            "country preference, highest version/revision, GameCube re-editions of NES games."
        ),
    )
    roms.add_argument(
        "-i", "--input", type=Path, required=True, metavar="DIR_OR_FILE",
        help="Directory with the zipped ROMs, or a file with one ROM name per line",
    )
    roms.add_argument(
        "-o", "--output", type=Path, default=Path("_rom-selection.txt"),
        help="Output file for the filtered ROM list (default: _rom-selection.txt)",
    )
    roms.add_argument(
        "-c", "--countries", type=split_list, metavar="C1[,CN]",
        help="Country preference, most relevant first (default: USA,World,Europe)",
    )
    roms.add_argument(
        "-e", "--exclude", action="store_true",
        help="Skip ROMs whose countries are not in the preference list",
    )
    roms.add_argument(
        "-d", "--dryrun", action="store_true",
        help="Dry run/analyze mode: print the scoring in the terminal",
    )
    roms.add_argument(
        "-sn", "--skipname", dest="skip_name", type=split_list, action="append",
        metavar="WORD[,WORD]", help="Skip ROMs whose name contains any word (case-insensitive)",
    )
    roms.add_argument(
        "-sa", "--skipattr", dest="skip_attr", type=split_list, action="append",
        metavar="ATTR[,ATTR]", help="Skip ROMs with any of the attributes (case-insensitive)",
    )
    roms.add_argument(
        "-fa", "--forceattr", dest="force_attr", type=split_list, action="append",
        metavar="ATTR[,ATTR]", help="Prefer ROMs with any of the attributes (case-insensitive)",
    )
    roms.add_argument(
        "-np", "--noproto", action="store_true",
        help="Skip Beta, Proto, Sample, Demo, Program and Debug ROMs",
    )
    roms.add_argument(
        "-nu", "--nounl", action="store_true",
        help="Skip Homebrew, Unl, Aftermarket, Pirate and Unknown ROMs",
    )
    roms.add_argument(
        "-nm", "--nomini", action="store_true",
        help="Skip mini console and virtual console ROMs",
    )
    roms.add_argument("-nb", "--nobios", action="store_true", help="Skip BIOS ROMs")
    roms.set_defaults(handler=filter_roms_cli)

    arcade = subparsers.add_parser(
        "arcade",
        help="Filter an arcade XML Dat file",
        description=(
            "Keeps parent ROMs and the clones that support a different number of players. "
            "BIOS sets and ROMs that need another set's BIOS are excluded."
        ),
    )
    arcade.add_argument("romlist", type=Path, help="XML Dat file with the ROMs")
    arcade.add_argument(
        "-o", "--output", type=Path, default=Path("arcade_roms_filtered.txt"),
        help="Output file with the filtered ROMs (default: arcade_roms_filtered.txt)",
    )
    arcade.add_argument("-x", "--xml", type=Path, help="Also write a filtered XML Dat file")
    arcade.add_argument(
        "-pd", "--print-description", action="store_true",
        help="Print the description and uncompressed size of each ROM",
    )
    arcade.add_argument("-m", "--manufacturer", help="Only keep ROMs of this manufacturer")
    arcade.add_argument(
        "-s", "--skip", type=split_list, metavar="ATTR[,ATTR]",
        help="Skip ROMs whose description contains any of the words (case-insensitive)",
    )
    arcade.add_argument(
        "-d", "--dryrun", action="store_true", help="Print the output instead of writing files"
    )
    arcade.set_defaults(handler=filter_arcade_cli)

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the CLI application.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        args.handler(args)
        return 0

    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user.")
        return 1
    except ValidationError as e:
        print(f"Invalid options: {e}")
        return 1
    except CatalogSourceError as e:
        print(f"Error: {e}")
        return 1
    except OSError as e:
        print(f"Error: {e}")
        return 1
    except Exception as e:
        logger.exception("Unexpected error occurred")
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
