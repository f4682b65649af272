from __future__ import annotations

import argparse
import asyncio
import json

from kg_traversal.settings import settings


def _configure_logging() -> None:
    import logging

    level = (settings.log_level or "INFO").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def cmd_version() -> int:
    from kg_traversal import __version__

    print(__version__)
    return 0


def cmd_serve(_args: argparse.Namespace) -> int:
    from kg_traversal.analysis_service.server import main

    main()
    return 0


def cmd_analyze(args: argparse.Namespace) -> int:
    _configure_logging()
    from kg_traversal.analysis_service.dispatcher import AnalysisRequest, run_analysis
    from kg_traversal.analysis_service.errors import AnalysisError
    from kg_traversal.knowledge_graph.store import StaticEntityStore

    store = StaticEntityStore.from_json_file(args.snapshot)
    req = AnalysisRequest(
        source_node_id=args.source,
        target_node_id=args.target,
        max_depth=args.max_depth if args.max_depth is not None else settings.default_max_depth,
        analysis_type=args.type,
    )
    try:
        out = asyncio.run(run_analysis(store, req))
    except AnalysisError as e:
        print(json.dumps({"error": e.message}))
        return 2 if e.status_code == 400 else 1
    print(json.dumps(out, indent=2, ensure_ascii=False))
    return 0


def cmd_summary(args: argparse.Namespace) -> int:
    _configure_logging()
    from kg_traversal.analysis_service.dispatcher import run_summary
    from kg_traversal.analysis_service.errors import AnalysisError
    from kg_traversal.knowledge_graph.store import StaticEntityStore

    store = StaticEntityStore.from_json_file(args.snapshot)
    try:
        out = asyncio.run(run_summary(store))
    except AnalysisError as e:
        print(json.dumps({"error": e.message}))
        return 2 if e.status_code == 400 else 1
    print(json.dumps(out, indent=2, ensure_ascii=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="kgt")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version").set_defaults(func=lambda _a: cmd_version())

    sub.add_parser("serve", help="Run the HTTP analysis service").set_defaults(func=cmd_serve)

    an = sub.add_parser("analyze", help="Run one analysis against a JSON snapshot")
    an.add_argument("snapshot", help='JSON file with {"nodes": [...], "relationships": [...]}')
    an.add_argument("--source", default=None)
    an.add_argument("--target", default=None)
    an.add_argument("--max-depth", type=int, default=None)
    an.add_argument(
        "--type",
        default="shortest_path",
        help="shortest_path|neighborhood|centrality|influence",
    )
    an.set_defaults(func=cmd_analyze)

    sm = sub.add_parser("summary", help="Print whole-graph statistics for a JSON snapshot")
    sm.add_argument("snapshot")
    sm.set_defaults(func=cmd_summary)

    return p


def app(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    rc = args.func(args)
    raise SystemExit(rc)


if __name__ == "__main__":
    app()
