"""Bundled demo grammar and sentences, used by ``earleytree --demo``."""

rules = """\
# Sums of unary numbers
Sum -> Number
Sum -> Number '+' Sum
Number -> '1'
Number -> Number '1'
"""

# sentences starting with '*' are expected to be rejected
sentence_list = [
    "1",
    "1 + 1 1",
    "1 1 1 + 1 + 1 1",
    "*1 +",
    "*+ 1",
]
