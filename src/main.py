"""Command-line entry point for the booking engine."""

import argparse
import asyncio
import json
import sys
from datetime import date
from typing import Optional

from src.clients import UpstreamFetchError
from src.config import configure_logging, get_logger, settings
from src.engine.errors import UnresolvedCapacityError, ValidationError
from src.models.extras import SelectedEnhancement
from src.models.selection import BookingSelection, DepartureStage, ExtraBedSelection
from src.services import BookingEngineService

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="booking-engine", description=__doc__)
    subparsers = parser.add_subparsers(dest="command", required=True)

    calendar = subparsers.add_parser("calendar", help="Classify the dates of a window")
    calendar.add_argument("--start", type=date.fromisoformat, required=True)
    calendar.add_argument("--end", type=date.fromisoformat, required=True)
    calendar.add_argument("--room", help="Room id to check booked dates against")
    calendar.add_argument(
        "--arrival",
        type=date.fromisoformat,
        help="Classify for departure after this arrival instead of for arrival",
    )

    quote = subparsers.add_parser("quote", help="Validate and price a stay")
    quote.add_argument("--start", type=date.fromisoformat, required=True, help="Check-in date")
    quote.add_argument("--end", type=date.fromisoformat, required=True, help="Check-out date")
    quote.add_argument("--room", required=True)
    quote.add_argument("--rate")
    quote.add_argument("--adults", type=int, default=2)
    quote.add_argument("--rooms", type=int, default=1)
    quote.add_argument("--extra-beds", type=int, default=0)
    quote.add_argument("--voucher")
    quote.add_argument(
        "--enhancement",
        action="append",
        default=[],
        metavar="ID[:QTY]",
        help="Add an enhancement offered for the stay, repeatable",
    )
    return parser


async def run_calendar(service: BookingEngineService, args: argparse.Namespace) -> int:
    stage = DepartureStage(arrival=args.arrival) if args.arrival else None
    classifications = await service.calendar(args.start, args.end, args.room, stage)
    output = [
        {
            "date": item.date.isoformat(),
            "status": item.booking_status.value,
            "clickable": item.clickable,
            "reason": item.reason,
        }
        for item in classifications
    ]
    print(json.dumps(output, indent=2))
    return 0


def _parse_enhancement(value: str) -> tuple[str, Optional[int]]:
    enhancement_id, _, quantity = value.partition(":")
    return enhancement_id, int(quantity) if quantity else None


async def run_quote(service: BookingEngineService, args: argparse.Namespace) -> int:
    selection = BookingSelection(
        check_in=args.start,
        check_out=args.end,
        adults=args.adults,
        room_count=args.rooms,
        selected_room_id=args.room,
        selected_rate_id=args.rate,
        extra_bed=ExtraBedSelection(enabled=args.extra_beds > 0, count=args.extra_beds),
        voucher_code=args.voucher,
    )

    if args.enhancement:
        catalog = await service.enhancements_for(selection)
        offered = {enhancement.id: enhancement for enhancement in catalog.enhancements}
        for value in args.enhancement:
            enhancement_id, quantity = _parse_enhancement(value)
            if enhancement_id not in offered:
                raise ValidationError(
                    f"Enhancement {enhancement_id} is not offered for this stay",
                    field="enhancements",
                )
            selection.selected_enhancements.append(
                SelectedEnhancement(enhancement=offered[enhancement_id], quantity=quantity)
            )

    context = await service.quote(selection)
    print(json.dumps(context.get_results(), indent=2, default=str))
    return 0 if context.success else 1


async def main(argv: Optional[list[str]] = None) -> int:
    """Run a CLI command.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    logger.info("Starting booking engine", environment=settings.environment, command=args.command)

    service = BookingEngineService()
    try:
        if args.command == "calendar":
            return await run_calendar(service, args)
        return await run_quote(service, args)
    except ValidationError as e:
        print(json.dumps({"success": False, "reason": e.reason, "field": e.field}))
        return 1
    except UnresolvedCapacityError as e:
        print(json.dumps({"success": False, "reason": str(e)}))
        return 2
    except UpstreamFetchError as e:
        logger.error("Booking backend unavailable", error=str(e))
        print(json.dumps({"success": False, "reason": str(e)}))
        return 3
    finally:
        await service.close()


def run_sync(argv: Optional[list[str]] = None) -> int:
    """Run the async main function synchronously.

    Returns:
        Exit code from main()
    """
    configure_logging()
    return asyncio.run(main(argv))


if __name__ == "__main__":
    sys.exit(run_sync())
