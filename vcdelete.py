#!/usr/bin/env python3
"""
vcdelete - Main Entry Point
Deletes a managed entity (VM, cluster, folder, ...) from a vCenter inventory
and waits for the destroy task to finish.
"""

import logging
import os
import sys

from dotenv import load_dotenv
from pyVmomi import vim, vmodl

from logger.log_config import setup_logger
from operation_logger import OperationLogger
from arg_parser import create_parser
from vcenter_utils import get_vcenter_instance, env_timeout
from managers.entity_manager import EntityManager, STATUS_NOT_FOUND
from managers.exceptions import AmbiguousEntityNameError, TaskFailedError, TaskWaitTimeoutError
from managers.models import describe_fault
from constants import (
    ENV_URL, ENV_USER, ENV_PASS,
    EXIT_SUCCESS, EXIT_FAILURE, EXIT_NOT_FOUND, EXIT_AMBIGUOUS,
    MSG_NOT_FOUND, MSG_DELETED, MSG_FAILED
)

load_dotenv()
logger = logging.getLogger('vcdelete')


def delete_managed_entity(vcenter, entity_name, entity_type="ManagedEntity"):
    """
    Runs the delete workflow against a connected VCenter and prints the result.

    :return: (exit_code, overall_status)
    """
    manager = EntityManager(vcenter)
    vimtype = getattr(vim, entity_type)
    try:
        result = manager.delete_entity(entity_name, vimtype)
    except AmbiguousEntityNameError as e:
        logger.error(str(e))
        for candidate in e.candidates:
            print(f" Candidate: {candidate.type_name} {candidate.moid}")
        print(MSG_FAILED.format(name=entity_name, reason="name is ambiguous"))
        return EXIT_AMBIGUOUS, "ambiguous"
    except TaskFailedError as e:
        logger.error(f"Delete task for '{entity_name}' failed: {e.message}")
        print(MSG_FAILED.format(name=entity_name, reason=e.message))
        return EXIT_FAILURE, "failed"
    except TaskWaitTimeoutError as e:
        logger.error(str(e))
        print(MSG_FAILED.format(name=entity_name, reason=str(e)))
        return EXIT_FAILURE, "timed_out"

    if result.status == STATUS_NOT_FOUND:
        print(MSG_NOT_FOUND.format(name=entity_name))
        return EXIT_NOT_FOUND, "not_found"

    print(MSG_DELETED.format(name=entity_name, type_name=result.entity.type_name))
    return EXIT_SUCCESS, "success"


def main(argv=None):
    """Main execution function."""
    global logger

    parser = create_parser()
    args = parser.parse_args(argv)

    # --- Validation: url/user/password may come from the environment ---
    missing = [flag for flag, value, env in (
        ('--url', args.url, ENV_URL),
        ('--username', args.username, ENV_USER),
        ('--password', args.password, ENV_PASS),
    ) if not (value or os.getenv(env))]
    if missing:
        parser.error(f"the following arguments are required: {', '.join(missing)}")

    operation_logger = OperationLogger('delete', vars(args))
    logger = setup_logger(run_id=operation_logger.run_id, verbose=args.verbose)
    operation_logger.log_start()

    exit_code, overall_status = EXIT_FAILURE, "failed"
    try:
        vcenter = get_vcenter_instance(
            args.url, args.username, args.password,
            port=args.port,
            disable_ssl_verification=args.disable_ssl_verify,
            task_timeout=args.timeout if args.timeout is not None else env_timeout()
        )
        if vcenter is None:
            print("Unable to connect to the web service. See the log for details.")
            overall_status = "connection_failed"
        else:
            exit_code, overall_status = delete_managed_entity(vcenter, args.entityname, args.entity_type)
    except KeyboardInterrupt:
        print("\nTerminated by user.")
        overall_status = "terminated_by_user"
    except vmodl.MethodFault as fault:
        logger.error(f"vCenter fault: {describe_fault(fault)}", exc_info=args.verbose)
        print(MSG_FAILED.format(name=args.entityname, reason=describe_fault(fault)))
        overall_status = "failed_fault"
    except Exception as e:
        logger.critical(f"Unhandled error during delete: {e}", exc_info=True)
        overall_status = "failed_exception"
    finally:
        operation_logger.finalize(overall_status)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
