from __future__ import annotations

from pathlib import Path

from mangatracker import check_for_updates, parse_args, validate_args
from mangatracker.history import find_places_database
from mangatracker.store import SeriesStore
from mangatracker.ui import ConsoleUI


def main() -> None:
    args = parse_args()
    validate_args(args)

    ui = ConsoleUI()

    try:
        store = SeriesStore(args.db)
        if args.command == "list":
            series_set = store.allowed if args.which == "allowed" else store.denied
            for url in series_set.list_all():
                print(url)
            return

        places = Path(args.places) if args.places else find_places_database()
        check_for_updates(
            places,
            store,
            retries=args.retries,
            backoff=args.backoff,
            timeout=args.timeout,
            delay=args.delay,
            ui=ui,
        )
    except KeyboardInterrupt:
        ui.log_event("Interrupted by user.", level="error")
        raise SystemExit("Interrupted by user.")
    except Exception as exc:
        ui.log_event(str(exc), level="error")
        raise SystemExit(str(exc)) from None
    finally:
        ui.finalize()


if __name__ == "__main__":
    main()
