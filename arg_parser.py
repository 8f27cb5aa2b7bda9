# arg_parser.py

import argparse
import argcomplete

from constants import ENTITY_TYPES, DEFAULT_ENTITY_TYPE, ENV_URL, ENV_USER, ENV_PASS, ENV_TASK_TIMEOUT


def positive_float(value):
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not a number.")
    if number <= 0:
        raise argparse.ArgumentTypeError("Timeout must be greater than zero.")
    return number


def create_parser():
    """
    Creates and configures the argparse object for the vcdelete tool.
    """
    parser = argparse.ArgumentParser(
        prog='vcdelete',
        description="Deletes the specified managed entity from the inventory tree. "
                    "The managed entity can be a virtual machine, ClusterComputeResource or a Folder.",
        epilog="Example: vcdelete --url https://vc01/sdk --username admin --password secret --entityname testFolder"
    )

    parser.add_argument('--url', help=f'URL of the web service (or {ENV_URL}).')
    parser.add_argument('--username', help=f'Username for the authentication (or {ENV_USER}).')
    parser.add_argument('--password', help=f'Password for the authentication (or {ENV_PASS}).')
    parser.add_argument('--entityname', required=True,
                        help='Name of the Virtual Machine|ClusterComputeResource|Folder to delete.')
    parser.add_argument('--type', dest='entity_type', choices=ENTITY_TYPES, default=DEFAULT_ENTITY_TYPE,
                        help='Only consider entities of this type.')
    parser.add_argument('--port', type=int, help='Web service port (default: from URL, else 443).')
    parser.add_argument('--disable-ssl-verify', action='store_true', default=None,
                        help='Skip SSL certificate verification.')
    parser.add_argument('--timeout', type=positive_float,
                        help=f'Stop waiting for the delete task after this many seconds (or {ENV_TASK_TIMEOUT}).')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging.')

    argcomplete.autocomplete(parser)
    return parser
