# SPDX-License-Identifier: LGPL-2.1-or-later

import argparse
import errno
import json
import logging
import os
import sys

import jsonschema as js
import yaml

import libvmnet
from libvmnet import PrettyState
from libvmnet.error import VmNetValueError
from libvmnet.error import VmNetVerificationError


def main():
    parser = argparse.ArgumentParser()

    subparsers = parser.add_subparsers()
    _setup_subcommand_create(subparsers)
    _setup_subcommand_update(subparsers)
    _setup_subcommand_render(subparsers)
    _setup_subcommand_verify(subparsers)
    _setup_subcommand_version(subparsers)
    parser.add_argument(
        "--version", action="store_true", help="Display vmnetstate version"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )

    if len(sys.argv) == 1:
        parser.print_usage()
        return errno.EINVAL
    args = parser.parse_args()

    logging.basicConfig(
        format="%(asctime)s %(name)-12s %(levelname)-8s %(message)s",
        level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    if args.version:
        print(libvmnet.__version__)
    elif not hasattr(args, "func"):
        parser.print_usage()
        return errno.EINVAL
    else:
        return args.func(args)


def _add_output_arguments(parser):
    parser.add_argument(
        "--json",
        help="Output as JSON",
        default=True,
        action="store_false",
        dest="yaml",
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Guest root directory to write resolver and route files into",
    )


def _setup_subcommand_create(subparsers):
    parser_create = subparsers.add_parser(
        "create", help="Validate VM creation payload"
    )
    parser_create.add_argument(
        "file",
        help="File containing creation payload. "
        "stdin is used when '-' is specified.",
    )
    _add_output_arguments(parser_create)
    parser_create.set_defaults(func=create)


def _setup_subcommand_update(subparsers):
    parser_update = subparsers.add_parser(
        "update", help="Apply update payload on top of VM network state"
    )
    parser_update.add_argument(
        "state_file", help="File containing current VM network state"
    )
    parser_update.add_argument(
        "file",
        help="File containing update payload. "
        "stdin is used when '-' is specified.",
    )
    _add_output_arguments(parser_update)
    parser_update.set_defaults(func=update)


def _setup_subcommand_render(subparsers):
    parser_render = subparsers.add_parser(
        "render", help="Show guest files of VM network state"
    )
    parser_render.add_argument(
        "state_file", help="File containing VM network state"
    )
    parser_render.set_defaults(func=render)


def _setup_subcommand_verify(subparsers):
    parser_verify = subparsers.add_parser(
        "verify", help="Check guest files against VM network state"
    )
    parser_verify.add_argument(
        "state_file", help="File containing VM network state"
    )
    parser_verify.add_argument("root", help="Guest root directory")
    parser_verify.set_defaults(func=verify)


def _setup_subcommand_version(subparsers):
    parser_version = subparsers.add_parser(
        "version", help="Display vmnetstate version"
    )
    parser_version.set_defaults(func=version)


def version(args):
    print(libvmnet.__version__)


def create(args):
    payload, use_yaml = _load_state_file(args.file)
    return _run_and_print(
        lambda: libvmnet.create(payload), args.yaml and use_yaml, args.root
    )


def update(args):
    current_state, _ = _load_state_file(args.state_file)
    payload, use_yaml = _load_state_file(args.file)
    return _run_and_print(
        lambda: libvmnet.update(current_state, payload),
        args.yaml and use_yaml,
        args.root,
    )


def render(args):
    state, _ = _load_state_file(args.state_file)
    for rel_path, content in libvmnet.gen_guest_files(state).items():
        print(f"==> {rel_path} <==")
        sys.stdout.write(content)


def verify(args):
    state, _ = _load_state_file(args.state_file)
    try:
        libvmnet.verify_guest_files(state, args.root)
    except VmNetVerificationError as e:
        sys.stderr.write("ERROR: Guest files mismatch:{}\n".format(str(e)))
        return os.EX_DATAERR
    print("Guest files match VM network state")


def _run_and_print(func, use_yaml, root):
    try:
        state = func()
    except VmNetValueError as e:
        sys.stderr.write("ERROR: {}\n".format(str(e)))
        return os.EX_DATAERR
    except js.ValidationError as e:
        sys.stderr.write("ERROR: Invalid payload: {}\n".format(e.message))
        return os.EX_DATAERR

    if root:
        libvmnet.write_guest_files(state, root)
    _print_state(state, use_yaml=use_yaml)


def _load_state_file(path):
    if path == "-" and not os.path.isfile(path):
        statedata = sys.stdin.read()
    else:
        with open(path) as statefile:
            statedata = statefile.read()
    return _parse_state(statedata)


def _parse_state(statedata):
    # JSON dictionaries start with a curly brace
    if statedata.lstrip().startswith("{"):
        return json.loads(statedata), False
    return yaml.load(statedata, Loader=yaml.SafeLoader) or {}, True


def _print_state(state, use_yaml=False):
    state = PrettyState(state)
    if use_yaml:
        sys.stdout.write(state.yaml)
    else:
        print(state.json)
