"""
Little Reviews - personal media-review catalogue

CLI entry point for building the catalogue and browsing or authoring reviews.
"""

import argparse
import logging
import sys

from src.controller import CatalogueController
from src.models.query import SORT_LABELS, QueryState, SortKey
from src.models.review import MediaType, format_display_date, media_type_info
from src.pipeline.aggregation import Aggregator
from src.pipeline.report import CatalogueReport
from src.runtime.authoring import ReviewDraft
from src.runtime.loader import ArtifactLoader, LoadStatus
from src.runtime.navigation import LocationHistory, with_reference
from src.runtime.query import review_count_label
import config.settings as settings

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def print_banner(title: str) -> None:
    print("=" * 60)
    print(title)
    print("=" * 60)


def print_review(review, full: bool = False) -> None:
    info = media_type_info(review.media_type)
    byline = f" by {review.author}" if review.author else ""
    print(f"{review.title}{byline} ({review.release_year})")
    print(f"  {info.label} | {review.rating}/{settings.MAX_RATING} | Reviewed on {format_display_date(review.review_date)}")
    if review.updated_date:
        print(f"  Last updated: {format_display_date(review.updated_date)}")
    print(f"  id: {review.id}")
    print()
    print(review.text if full else review.excerpt())
    print()


def start_controller(args, location: str = "/") -> CatalogueController:
    controller = CatalogueController(
        loader=ArtifactLoader(args.artifact),
        history=LocationHistory(location),
        download_dir=getattr(args, "out_dir", str(settings.DOWNLOAD_DIR)),
    )
    result = controller.start()
    if result.status == LoadStatus.UNAVAILABLE:
        raise RuntimeError(f"Reviews are unavailable: {result.error}")
    return controller


def cmd_build(args) -> int:
    print_banner("Little Reviews - Building reviews")
    print(f"Content: {args.content_dir}")
    print(f"Output: {args.output}")
    print()

    result = Aggregator.from_paths(args.content_dir, args.output).run()

    print(f"✅ Built {result.record_count} reviews to {result.output_path}")
    if result.skipped:
        print(f"⚠️  Skipped {len(result.skipped)} files: {', '.join(result.skipped)}")
    for overwritten, winner in result.collisions:
        print(f"⚠️  Duplicate id: {winner} overwrote {overwritten}")
    return 0


def cmd_list(args) -> int:
    controller = start_controller(args)
    controller.query = QueryState(
        filter_type=args.type,
        search_term=args.search,
        sort_key=args.sort,
        sort_direction=args.direction,
    )
    reviews = controller.visible_reviews()

    print_banner(
        f"{review_count_label(len(reviews))} | sorted by "
        f"{SORT_LABELS[controller.query.sort_key]} ({controller.query.sort_direction.value})"
    )
    if not reviews:
        print(controller.empty_state_message())
        return 0

    for review in reviews:
        print_review(review)
    return 0


def cmd_show(args) -> int:
    controller = start_controller(args, location=with_reference("/", args.review_id))
    review = controller.active_review()
    if review is None:
        print("Review not found.")
        return 1
    print_review(review, full=True)
    return 0


def _draft_from_args(args, base: ReviewDraft = None) -> ReviewDraft:
    def pick(name, fallback_attr):
        value = getattr(args, name)
        if value is not None:
            return value
        if base is None:
            raise ValueError(f"--{name.replace('_', '-')} is required")
        return getattr(base, fallback_attr)

    return ReviewDraft(
        title=pick("title", "title"),
        media_type=pick("type", "media_type"),
        rating=pick("rating", "rating"),
        text=pick("text", "text"),
        release_year=pick("year", "release_year"),
        author=args.author if args.author is not None else (base.author if base else None),
    )


def cmd_new(args) -> int:
    controller = start_controller(args)
    controller.new_review()
    path = controller.save_review(_draft_from_args(args))
    print(f"✅ Review YAML written to {path}")
    print(f"Move it to {settings.CONTENT_DIR} and run the build to publish it.")
    return 0


def cmd_edit(args) -> int:
    controller = start_controller(args)
    existing = controller.catalogue.get(args.review_id)
    if existing is None:
        print(f"Review not found: {args.review_id}")
        return 1
    controller.edit_review(existing.id)
    path = controller.save_review(_draft_from_args(args, ReviewDraft.from_record(existing)))
    print(f"✅ Updated review YAML written to {path}")
    print(f"Replace the file in {settings.CONTENT_DIR} and run the build to publish it.")
    return 0


def cmd_report(args) -> int:
    controller = start_controller(args)
    output_path = CatalogueReport().generate(controller.catalogue.reviews, args.output_dir)
    print(f"✅ Catalogue report: {output_path}")
    return 0


def _rating(value: str) -> float:
    number = float(value)
    return int(number) if number.is_integer() else number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Little Reviews - personal media-review catalogue",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Aggregate content/reviews/*.yaml into public/reviews.json
  python main.py build

  # Best-rated books first
  python main.py list --type Book --sort rating

  # Write a new review file to downloads/
  python main.py new --title "Dune" --type Book --author "Frank Herbert" \\
                     --rating 4.5 --year 1965 --text "Sand, spice, prophecy."
        """
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Aggregate record files into the artifact")
    build.add_argument("--content-dir", default=str(settings.CONTENT_DIR))
    build.add_argument("--output", default=str(settings.ARTIFACT_PATH))
    build.set_defaults(func=cmd_build)

    type_choices = ["all"] + [m.value for m in MediaType]

    listing = subparsers.add_parser("list", help="List reviews")
    listing.add_argument("--artifact", default=str(settings.ARTIFACT_PATH), help="Artifact path or URL")
    listing.add_argument("--type", default="all", choices=type_choices)
    listing.add_argument("--search", default="")
    listing.add_argument("--sort", default=SortKey.REVIEW_DATE.value, choices=[k.value for k in SortKey])
    listing.add_argument("--direction", default="desc", choices=["asc", "desc"])
    listing.set_defaults(func=cmd_list)

    show = subparsers.add_parser("show", help="Show one review")
    show.add_argument("review_id")
    show.add_argument("--artifact", default=str(settings.ARTIFACT_PATH), help="Artifact path or URL")
    show.set_defaults(func=cmd_show)

    for name, func, help_text in (
        ("new", cmd_new, "Write a new review YAML"),
        ("edit", cmd_edit, "Write an updated review YAML"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        if name == "edit":
            sub.add_argument("review_id")
        sub.add_argument("--artifact", default=str(settings.ARTIFACT_PATH), help="Artifact path or URL")
        sub.add_argument("--title")
        sub.add_argument("--type", choices=[m.value for m in MediaType])
        sub.add_argument("--author")
        sub.add_argument("--rating", type=_rating)
        sub.add_argument("--year", type=int)
        sub.add_argument("--text")
        sub.add_argument("--out-dir", default=str(settings.DOWNLOAD_DIR))
        sub.set_defaults(func=func)

    report = subparsers.add_parser("report", help="Write the per-type catalogue report")
    report.add_argument("--artifact", default=str(settings.ARTIFACT_PATH), help="Artifact path or URL")
    report.add_argument("--output-dir", default=str(settings.OUTPUT_ROOT))
    report.set_defaults(func=cmd_report)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level)

    try:
        exit_code = args.func(args)
        sys.exit(exit_code)

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        print("\n⚠️  Interrupted")
        sys.exit(1)

    except Exception as e:
        logger.error(f"{args.command} failed: {e}", exc_info=True)
        print(f"\n❌ {args.command} failed: {e}")
        print(f"Check {settings.LOG_FILE} for details")
        sys.exit(1)


if __name__ == "__main__":
    main()
