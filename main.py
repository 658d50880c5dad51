from rich.pretty import pprint

from flatargs import *


parser = Parser()
parser.register_positional("source", help="file to read")
parser.register_optional("-v", "--verbose", kind=FLAG, help="print every step")
parser.register_optional("-n", "--count", help="number of copies")
parser.register_optional("-t", "--tag", kind=APPEND, help="label to attach (repeatable)")


if __name__ == '__main__':
    residual = invoke(parser)
    pprint({
        "source": parser.value("source"),
        "verbose": parser.value("verbose"),
        "count": parser.value("count", 1, type=UINT16),
        "tags": [parser.value_at("tag", index) for index in range(parser.count("tag"))],
        "residual": residual,
    })
