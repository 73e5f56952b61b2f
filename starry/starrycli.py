#!/usr/bin/env python3

import starryparser
import starryvm

import optparse
import sys

from typing import Optional

def option_parser() -> optparse.OptionParser:
    usage = 'usage: %prog [options] filename'
    description = 'starry is a stack-based esoteric programming language.'
    p = optparse.OptionParser(prog='starry', usage=usage, description=description)
    p.add_option('-i', '--inst',
                 action='store_true',
                 default=False,
                 help='print decoded instruction code'
                 )
    p.add_option('-d', '--debug',
                 action='store_true',
                 default=False,
                 help='run with debug print'
                 )
    return p

def read_source(filename: str) -> Optional[str]:
    try:
        with open(filename, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError):
        print(f'File Open Error: {filename}', file=sys.stderr)
        return None

def dis(prog: list[starryvm.Inst]) -> int:
    for i, inst in enumerate(prog):
        print(f'[{i:03d}] {inst.decode()}')
    return 0

def run(prog: list[starryvm.Inst], labels: dict[int, int], debug: bool) -> int:
    vm = starryvm.Vm(prog, labels)
    if debug:
        result, fault = vm.run_with_trace()
    else:
        result, fault = vm.run()
    sys.stdout.flush()
    if result != 0:
        print(f'VM Runtime Error: {fault}', file=sys.stderr)
        return 1
    return 0

def main(argv: list[str]) -> int:
    p = option_parser()
    options, args = p.parse_args(argv)
    if len(args) != 2:
        p.print_usage(sys.stderr)
        return 1
    filename = args[1]
    src = read_source(filename)
    if src is None:
        return 1
    prog, labels, errors = starryparser.parse(src)
    if errors:
        for error in errors:
            print(f'Parser Error: {error}', file=sys.stderr)
        return 1
    if options.inst:
        return dis(prog)
    return run(prog, labels, options.debug)

def console_main():
    sys.exit(main(sys.argv))

if __name__ == '__main__':
    status = main(sys.argv)
    sys.exit(status)
