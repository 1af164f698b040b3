"""
Print the CREATE FUNCTION statements that register aes_encrypt /
aes_decrypt with the query engine.

    python scripts/gen_ddl.py --location /user/impala/udfs/libaesudf.so --database udfs
"""

import argparse
import sys

from aesudf.common.config import get_ddl_config
from aesudf.udf import create_function_sql


def main(argv=None):
    default_location, default_database = get_ddl_config()

    parser = argparse.ArgumentParser(description="Generate UDF registration DDL")
    parser.add_argument(
        "--location",
        default=default_location,
        help=f"library path on the cluster filesystem (default: {default_location})",
    )
    parser.add_argument(
        "--database",
        default=default_database,
        help="database to register the functions in",
    )
    args = parser.parse_args(argv)

    statements = create_function_sql(args.location, args.database)
    for stmt in statements:
        print(stmt)
    print(f"[DDL] {len(statements)} functions, library: {args.location}", file=sys.stderr)


if __name__ == "__main__":
    main(sys.argv[1:])
