import json
import argparse
import logging
import sys
from datetime import date
from typing import List, Tuple

from application.exceptions import EngineError, MalformedInputError
from backend.core.csv_import import build_header_map, parse_optional_float, parse_workout_csv, split_line
from backend.core.forecast import forecast_series
from backend.settings import get_settings
from domain.models import ForecastMethod

logger = logging.getLogger(__name__)


def read_series(text: str) -> Tuple[List[date], List[float]]:
    """Read ``date,value`` rows (ISO dates), skipping rows that do not parse."""
    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) < 2:
        raise MalformedInputError("Series file needs a header and at least one row")

    header = build_header_map(lines[0])
    date_idx = header.get("date", 0)
    value_idx = header.get("value", 1)

    dates: List[date] = []
    values: List[float] = []
    for line in lines[1:]:
        fields = split_line(line)
        raw_date = fields[date_idx].strip() if date_idx < len(fields) else ""
        raw_value = fields[value_idx].strip() if value_idx < len(fields) else ""
        value = parse_optional_float(raw_value)
        try:
            day = date.fromisoformat(raw_date)
        except ValueError:
            day = None
        if day is None or value is None:
            logger.warning(f"Skipping unparseable series row: {line!r}")
            continue
        dates.append(day)
        values.append(value)
    return dates, values


def _write(output: str, path: str = None) -> None:
    if path:
        with open(path, 'w') as f:
            f.write(output)
    else:
        print(output)


def cmd_preview(args, settings) -> None:
    with open(args.input, 'r', encoding='utf-8-sig') as f:
        text = f.read()

    drafts = parse_workout_csv(text, unknown_exercise_name=settings.unknown_exercise_name)
    payload = [d.model_dump(mode="json") for d in drafts]
    _write(json.dumps(payload, indent=2), args.output)


def cmd_forecast(args, settings) -> None:
    with open(args.input, 'r', encoding='utf-8-sig') as f:
        text = f.read()

    dates, values = read_series(text)
    series = forecast_series(
        dates,
        values,
        args.horizon if args.horizon is not None else settings.forecast_horizon_days,
        ForecastMethod(args.method),
        window=args.window if args.window is not None else settings.forecast_window,
        alpha=args.alpha if args.alpha is not None else settings.forecast_alpha,
        band_k=args.band_k if args.band_k is not None else settings.forecast_band_k,
    )
    _write(series.model_dump_json(indent=2), args.output)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Workout import preview and metric forecasts")
    sub = parser.add_subparsers(dest="command", required=True)

    preview = sub.add_parser("preview", help="Parse a workout export and print the sessions as JSON")
    preview.add_argument("input", help="Workout export (CSV) file path")
    preview.add_argument("-o", "--output", help="Output JSON file path (default: stdout)")
    preview.set_defaults(handler=cmd_preview)

    forecast = sub.add_parser("forecast", help="Forecast a daily series read from date,value rows")
    forecast.add_argument("input", help="CSV file with date,value columns")
    forecast.add_argument("--method", choices=[m.value for m in ForecastMethod], default="ma")
    forecast.add_argument("--horizon", type=int, help="Days to forecast")
    forecast.add_argument("--window", type=int, help="Moving-average window")
    forecast.add_argument("--alpha", type=float, help="Exponential smoothing factor")
    forecast.add_argument("--band-k", dest="band_k", type=float, help="Band width in std deviations")
    forecast.add_argument("-o", "--output", help="Output JSON file path (default: stdout)")
    forecast.set_defaults(handler=cmd_forecast)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        args.handler(args, settings)
    except FileNotFoundError:
        print(f"Error: File not found: {args.input}", file=sys.stderr)
        sys.exit(1)
    except EngineError as e:
        print(f"Error ({e.kind.value}): {e.message}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
