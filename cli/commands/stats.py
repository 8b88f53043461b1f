from __future__ import annotations

import json

from pipeline.pipeline import TLSStatsPipeline
from pipeline.report import render_text


def run_stats(args, pipeline: TLSStatsPipeline) -> int:
    force = bool(args.force)

    if args.print_text:
        print(pipeline.render(force=force), end="")
        return 0

    report = pipeline.get(force=force)

    if args.print_json:
        print(json.dumps(report.to_dict(), indent=1))
        return 0

    paths = pipeline.config.paths
    print(render_text(report), end="")
    print(f"\nReport generated {report.generation_date.isoformat()}", end="")
    if report.start_date and report.end_date:
        print(f" from usage between {report.start_date.isoformat()} and {report.end_date.isoformat()}", end="")
    print(f"\n  {paths.current_report}")
    return 0
