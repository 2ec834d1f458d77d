"""Print the plan for a configuration file without a Pulumi engine."""

import argparse
import json
import sys
from typing import List, Optional

import pulumi
import yaml

from awsaiml.config import load_config, plan_config
from awsaiml.errors import ModuleError


def get_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="awsaiml-plan",
        description="Show the IAM role decision, resources, ordering and outputs each module would declare.",
    )
    parser.add_argument("config", help="YAML configuration file")
    parser.add_argument("--module", dest="modules", action="append", default=[], help="Only show this module name (repeatable)")
    parser.add_argument("--format", choices=["yaml", "json"], default="yaml", help="Output format")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = get_arg_parser().parse_args(argv)
    try:
        plans = plan_config(load_config(args.config))
    except (ModuleError, ValueError) as e:
        pulumi.log.error(f"Planning {args.config} failed: {e}")
        return 1
    except OSError as e:
        pulumi.log.error(f"Unable to read {args.config}: {e}")
        return 1

    selected = [plan.to_dict() for plan in plans if not args.modules or plan.name in args.modules]
    unknown = set(args.modules) - {plan.name for plan in plans}
    if unknown:
        pulumi.log.error(f"No such module(s): {', '.join(sorted(unknown))}")
        return 1
    if args.format == "json":
        json.dump(selected, sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        yaml.safe_dump(selected, sys.stdout, sort_keys=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
