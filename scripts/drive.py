"""Replay a recorded GPS track through the turn-signal pipeline.

Usage:
    uv run python scripts/drive.py track.jsonl
    uv run python scripts/drive.py track.csv --dest 52.5200,13.4050 --hz 10
    uv run python scripts/drive.py track.jsonl --no-route --indicator

Turn detections and warning changes are printed as they happen; every fix and
behavior event is written to the SQLite behavior log (``--db``).
"""

from __future__ import annotations

import argparse
import logging
import time

from dotenv import load_dotenv

load_dotenv()

from smart_indicator.behavior.sink import BehaviorLogWriter  # noqa: E402
from smart_indicator.config import IndicatorConfig  # noqa: E402
from smart_indicator.geo.models import GeoPoint  # noqa: E402
from smart_indicator.location.parser import LocationParser  # noqa: E402
from smart_indicator.location.replay import ReplayLocationSource  # noqa: E402
from smart_indicator.location.stream import LocationEventStream  # noqa: E402
from smart_indicator.pipeline.engine import IndicatorEngine  # noqa: E402
from smart_indicator.routing.osrm import OSRMClient  # noqa: E402
from smart_indicator.routing.refresher import RouteRefresher  # noqa: E402


def _parse_point(text: str) -> GeoPoint:
    try:
        lat_s, lon_s = text.split(",")
        point = GeoPoint(float(lat_s), float(lon_s))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected LAT,LON, got {text!r}") from exc
    if not point.is_valid():
        raise argparse.ArgumentTypeError(f"coordinates out of range: {text!r}")
    return point


def main() -> None:
    ap = argparse.ArgumentParser(description="Replay a GPS track through the turn-signal pipeline")
    ap.add_argument("track", help="Track file (.jsonl or .csv)")
    ap.add_argument("--dest", type=_parse_point, default=None, help="Destination as LAT,LON")
    ap.add_argument("--db", default=None, help="SQLite behavior log path")
    ap.add_argument("--hz", type=float, default=1.0, help="Replay rate in fixes per second")
    ap.add_argument("--no-route", action="store_true", help="Do not fetch routes from OSRM")
    ap.add_argument("--indicator", action="store_true", help="Drive with the indicator on")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    cfg = IndicatorConfig.from_env()
    if args.db:
        cfg.db_path = args.db

    source = ReplayLocationSource(args.track)
    stream = LocationEventStream(source, LocationParser(), target_hz=args.hz)
    writer = BehaviorLogWriter(cfg.db_path)

    client = None
    refresher = None
    if args.dest is not None and not args.no_route:
        client = OSRMClient(cfg.routing)
        refresher = RouteRefresher(client, refresh_interval_s=cfg.routing.refresh_interval_s)

    engine = IndicatorEngine(cfg, sink=writer, refresher=refresher, stream=stream)
    if args.dest is not None:
        engine.set_destination(args.dest)
    engine.set_indicator(args.indicator)

    print(f"Track    : {args.track}")
    print(f"Database : {cfg.db_path}")
    route = "off" if refresher is None else f"to {args.dest.latitude:.5f},{args.dest.longitude:.5f}"
    print(f"Route    : {route}")
    print()

    engine.start()
    fixes = 0
    last_signal = None
    last_warning = ""
    try:
        while True:
            snap = engine.tick()
            if snap is None:
                if stream.drained():
                    break
                time.sleep(0.01)
                continue

            fixes += 1
            if snap.turn_signal is not last_signal:
                print(
                    f"  [{fixes:>5}] turn: {snap.turn_signal.value:<8} "
                    f"{snap.speed_kmh:5.1f} km/h",
                    flush=True,
                )
                last_signal = snap.turn_signal
            if snap.warning_text != last_warning:
                print(f"  [{fixes:>5}] {snap.warning_text or 'warning cleared'}", flush=True)
                last_warning = snap.warning_text
            if snap.advisory_warning:
                print(f"  [{fixes:>5}] {snap.advisory_warning}", flush=True)
    except KeyboardInterrupt:
        pass
    finally:
        engine.stop()
        if refresher is not None:
            refresher.join()
        if client is not None:
            client.close()
        writer.shutdown()
        print(f"\nProcessed {fixes} fix(es).")


if __name__ == "__main__":
    main()
