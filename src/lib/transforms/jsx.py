"""
JSX attribute names
"""

RENAMES = {
    'class': 'className',
    'for': 'htmlFor',
}


def jsx(node, ancestors, state) -> None:
    for attr in node.attributes or []:
        if attr.name in RENAMES:
            attr.name = RENAMES[attr.name]
