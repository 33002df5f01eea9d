import sys

from rich.pretty import pprint

from argosy import *

options = Options(
    Option("-o", "--output", required=True),
    Option("-D", "--define", nargs="+"),
    Flag("-d", "--debug"),
)
options.group(Flag("--json"), Flag("--yaml"), name="format")


if __name__ == '__main__':
    pprint(resolve(options, sys.argv[1:], flatten=flatteners.posix, shell=True, fancy=True))
