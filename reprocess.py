"""Command line for re-running response normalisation over exported analysis data.

Examples:
    resume-normalizer normalize response.txt
    resume-normalizer normalize analysis_results.json --unprocessed-only --limit 100
    resume-normalizer fields analysis_results.jsonl
"""

import argparse
import json
import logging
import os
import sys
from typing import Any, List, Mapping, Optional, Tuple

from dotenv import load_dotenv

from batch_processor import process_records, unprocessed_records
from field_report import analyze_field_names, format_report
from response_parser import env_int, parse_raw_response

load_dotenv()

logger = logging.getLogger(__name__)

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
BATCH_DEFAULT_LIMIT = env_int("BATCH_DEFAULT_LIMIT", 0)


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as handle:
        return handle.read()


def _load_records(text: str) -> Optional[List[Any]]:
    """Return the records held in ``text``, or ``None`` when it is a single raw response.

    A JSON array or a JSON-lines file is a batch of records; anything else
    (including a single JSON object) is one raw response.
    """
    try:
        data = json.loads(text)
    except ValueError:
        data = None
    else:
        return data if isinstance(data, list) else None

    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) < 2:
        return None
    records = []
    for line in lines:
        try:
            records.append(json.loads(line))
        except ValueError:
            return None
    return records


def _as_record(item: Any, index: int, id_key: str, payload_key: str) -> Mapping[str, Any]:
    if isinstance(item, Mapping):
        return item
    return {id_key: index, payload_key: item}


def _split_input(args: argparse.Namespace) -> Tuple[Optional[List[Mapping[str, Any]]], str]:
    text = _read_input(args.path)
    if args.single:
        return None, text
    items = _load_records(text)
    if items is None:
        return None, text
    records = [_as_record(item, index, args.id_key, args.payload_key) for index, item in enumerate(items)]
    return records, text


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def _cmd_normalize(args: argparse.Namespace) -> int:
    records, text = _split_input(args)
    if records is None:
        _print_json(parse_raw_response(text).to_dict())
        return 0

    if args.unprocessed_only:
        records = unprocessed_records(records, payload_key=args.payload_key)

    batch = process_records(
        records,
        limit=args.limit,
        offset=args.offset,
        id_key=args.id_key,
        payload_key=args.payload_key,
    )
    _print_json(batch.to_dict())
    return 1 if batch.failed else 0


def _cmd_fields(args: argparse.Namespace) -> int:
    records, text = _split_input(args)
    if records is None:
        payloads = [text]
    else:
        payloads = [record.get(args.payload_key) for record in records]
    sys.stdout.write(format_report(analyze_field_names(payloads)))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resume-normalizer",
        description="Normalise raw LLM resume-analysis responses into canonical records",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("path", help="Input file: raw response text, JSON array of records, or JSON lines ('-' for stdin)")
    common.add_argument("--id-key", default="id", help="Record key holding the record id (default: id)")
    common.add_argument("--payload-key", default="rawResponse", help="Record key holding the raw response (default: rawResponse)")
    common.add_argument(
        "--single",
        action="store_true",
        help="Treat the whole input as one raw response, even when it is a JSON array or JSON lines",
    )

    normalize = subparsers.add_parser(
        "normalize",
        parents=[common],
        help="Normalise one response or a batch of records (a JSON array is read as records unless --single)",
    )
    normalize.add_argument("--limit", type=int, default=BATCH_DEFAULT_LIMIT, help="Maximum records to process (0 = all)")
    normalize.add_argument("--offset", type=int, default=0, help="Records to skip before processing")
    normalize.add_argument(
        "--unprocessed-only",
        action="store_true",
        help="Only records that have a raw response but no parsed fields",
    )
    normalize.set_defaults(handler=_cmd_normalize)

    fields = subparsers.add_parser("fields", parents=[common], help="Report the key spellings used by the payloads")
    fields.set_defaults(handler=_cmd_fields)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    level = logging.getLevelName(LOG_LEVEL.strip().upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    if getattr(args, "limit", 0) < 0 or getattr(args, "offset", 0) < 0:
        parser.error("--limit and --offset must not be negative")

    try:
        return args.handler(args)
    except OSError as exc:
        print(f"Cannot read {args.path}: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
