#!/usr/bin/env python3
"""
BGP Node Status - BGP peer status of a Calico node

Usage examples:
bgp-node-status status
bgp-node-status serve --port 8080
bgp-node-status check-config
"""

import argparse
import json
import sys
from pathlib import Path

from bgp_status import __version__
from bgp_status.status import NodeStatusReporter
from bgp_status.utils.config import get_config_manager, reset_config_manager
from bgp_status.utils.error_handling import (
    handle_errors, ErrorFormatter, ConfigurationError, print_success, print_warning, print_error
)
from bgp_status.utils.logging import setup_logging
from bgp_status.utils.timeout_config import validate_timeouts


def setup_app_logging(verbose: bool = False, quiet: bool = False):
    """Configure logging for the application"""
    if quiet:
        level = 'WARNING'
    elif verbose:
        level = 'DEBUG'
    else:
        level = None  # From configuration

    setup_logging(level=level, console_colors=True)


@handle_errors('bgp-status.status')
def cmd_status(args):
    """Print the node status report"""
    reporter = NodeStatusReporter()
    reporter.write_status(sys.stdout)
    return 0


@handle_errors('bgp-status.serve')
def cmd_serve(args):
    """Serve the status report over HTTP"""
    from webui.webui_adapter import serve

    serve(host=args.host, port=args.port, log_level="warning" if args.quiet else None)
    return 0


@handle_errors('bgp-status.check-config')
def cmd_check_config(args):
    """Validate configuration and timeout settings"""
    manager = get_config_manager()

    issues = manager.validate_config()
    timeouts = validate_timeouts()

    if args.verbose:
        print(json.dumps(manager.to_dict(), indent=2))

    for name, details in timeouts["timeouts"].items():
        print(f"  {name:<15} {details['actual_value']:>6.1f}s  {details['description']}")
    for warning in timeouts["warnings"]:
        print_warning(warning)
    for error in timeouts["errors"]:
        print_error(error)

    if issues:
        raise ConfigurationError(
            f"{len(issues)} configuration issue(s): " + "; ".join(issues),
            guidance="Fix the configuration file or BGP_STATUS_* environment variables"
        )
    if not timeouts["valid"]:
        return 1

    print_success("Configuration is valid")
    return 0


def create_common_flags_parent(suppress_defaults: bool = False):
    """
    Create a parent parser with common global flags

    The subcommand copies use suppressed defaults so that flags given
    before the subcommand are not reset by the subparser.
    """
    parent_parser = argparse.ArgumentParser(add_help=False)
    defaults = {'default': argparse.SUPPRESS} if suppress_defaults else {}

    verbose_group = parent_parser.add_mutually_exclusive_group()
    verbose_group.add_argument('-v', '--verbose', action='store_true',
                               help='Enable verbose logging', **defaults)
    verbose_group.add_argument('-q', '--quiet', action='store_true',
                               help='Quiet mode (warnings only)', **defaults)

    parent_parser.add_argument('--config', type=Path, metavar='PATH',
                               help='Configuration file (default: search standard locations)',
                               **defaults)

    return parent_parser


def create_parser():
    """Create and configure argument parser"""
    common_flags_parent = create_common_flags_parent()
    subcommand_flags_parent = create_common_flags_parent(suppress_defaults=True)

    parser = argparse.ArgumentParser(
        prog='bgp-node-status',
        description='BGP Node Status - BGP peer status of a Calico node',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
        parents=[common_flags_parent]
    )

    parser.add_argument('--version', action='version', version=f'bgp-node-status {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    subparsers.add_parser('status',
                          help='Print BGP peer status (requires root)',
                          parents=[subcommand_flags_parent])

    serve_parser = subparsers.add_parser('serve',
                                         help='Serve the status report on GET /status/',
                                         parents=[subcommand_flags_parent])
    serve_parser.add_argument('--host',
                              help='Listen address (default: from config, 0.0.0.0)')
    serve_parser.add_argument('--port', type=int,
                              help='Listen port (default: from config, 8080)')

    subparsers.add_parser('check-config',
                          help='Validate configuration and timeouts',
                          parents=[subcommand_flags_parent])

    return parser


def main(argv=None):
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.config:
        reset_config_manager()
        get_config_manager(args.config)

    setup_app_logging(args.verbose, args.quiet)

    if not args.command:
        parser.print_help()
        return 1

    command_functions = {
        'status': cmd_status,
        'serve': cmd_serve,
        'check-config': cmd_check_config,
    }

    try:
        return command_functions[args.command](args)
    except KeyboardInterrupt:
        print_warning("Operation interrupted by user")
        return 130
    except Exception as e:
        print(ErrorFormatter.format_error(e))
        return 1


if __name__ == '__main__':
    sys.exit(main())
