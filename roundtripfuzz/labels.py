"""Generators for syntactically valid label keys, label values and DNS labels."""

from typing import List, NamedTuple


class CharRange(NamedTuple):
    first: str
    last: str

    def choose(self, inc: int) -> str:
        count = ord(self.last) - ord(self.first) + 1
        return chr(ord(self.first) + inc % count)


ALNUM = [CharRange('0', '9'), CharRange('a', 'z'), CharRange('A', 'Z')]
LABEL_MIDDLE = ALNUM + [CharRange('.', '.'), CharRange('-', '-'), CharRange('_', '_')]

DNS_START_END = [CharRange('0', '9'), CharRange('a', 'z')]
DNS_MIDDLE = DNS_START_END + [CharRange('-', '-')]

MAX_LABEL_LEN = 63


def _pick(gen, ranges: List[CharRange], inc_first: bool = False) -> str:
    if inc_first:
        inc = gen.get_int()
        ind = gen.get_int()
    else:
        ind = gen.get_int()
        inc = gen.get_int()
    return ranges[ind % len(ranges)].choose(inc)


def random_label_part(gen, can_be_empty: bool) -> str:
    """A label value or the name part of a label key (0..63 chars)."""
    start = gen.get_int()
    inc = gen.get_int()
    length = gen.get_int() % (MAX_LABEL_LEN + 1)
    if length == 0:
        if can_be_empty:
            return ""
        length = 1

    chars = [ALNUM[start % len(ALNUM)].choose(inc)]
    # middle characters read the increment before the range index
    for _ in range(length - 1):
        chars.append(_pick(gen, LABEL_MIDDLE, inc_first=True))
    chars[-1] = _pick(gen, ALNUM)
    return ''.join(chars)


def random_dns_label(gen) -> str:
    """A lowercase RFC 1123 label of 1..62 chars."""
    start = gen.get_int()
    inc = gen.get_int()
    length = gen.get_int() % MAX_LABEL_LEN
    if length == 0:
        length = 2

    chars = [DNS_START_END[start % len(DNS_START_END)].choose(inc)]
    for _ in range(length - 1):
        chars.append(_pick(gen, DNS_MIDDLE))
    chars[-1] = _pick(gen, DNS_START_END)
    return ''.join(chars)


def random_label_key(gen) -> str:
    """A label key: optional ``dns.prefix/`` followed by a name part."""
    name = random_label_part(gen, False)
    if not gen.get_bool():
        return name
    # with dots, at most 3 labels fit in the 253 characters a prefix may use
    count = gen.get_int() % 3 + 1
    prefix = '.'.join(random_dns_label(gen) for _ in range(count))
    return f"{prefix}/{name}"
