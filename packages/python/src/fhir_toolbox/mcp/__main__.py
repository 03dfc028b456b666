"""Run the fhir-toolbox MCP server.

The transport defaults to stdio, which is what desktop MCP clients
launch.  ``--http`` serves streamable HTTP and ``--sse`` serves
server-sent events; the two are mutually exclusive.
"""

import argparse

from fhir_toolbox.mcp.server import mcp


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="python -m fhir_toolbox.mcp",
        description="FHIR R4 decode/convert/validate tools over MCP.",
    )
    transport = parser.add_mutually_exclusive_group()
    transport.add_argument(
        "--http",
        dest="transport",
        action="store_const",
        const="streamable-http",
        help="serve streamable HTTP",
    )
    transport.add_argument(
        "--sse",
        dest="transport",
        action="store_const",
        const="sse",
        help="serve server-sent events",
    )
    parser.set_defaults(transport="stdio")
    args = parser.parse_args(argv)
    mcp.run(transport=args.transport)


if __name__ == "__main__":
    main()
