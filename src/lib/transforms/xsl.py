"""
XSL: drop `select` from variables and params that define their value
in content
"""

NAMES = ('xsl:variable', 'xsl:with-param')


def xsl(node, ancestors, state) -> None:
    if node.name in NAMES and node.attributes and (node.children or node.value):
        node.attributes = [attr for attr in node.attributes if attr.name != 'select']
