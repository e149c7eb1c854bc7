""" The override region index. Servers grant unconditional download rights
    inside named groups of tagged rectangles; this module tracks those groups
    and answers whether a chunk coordinate falls inside any of them.

    Override counts are expected to be small (dozens of rectangles), so the
    point query is a straight linear scan.
"""

from typing import Dict, Iterable, List, Mapping, Sequence, Union

from .protocol.message import Rectangle


Tagged = Dict[str, List[Rectangle]]


def bucket(rectangles: Iterable[Rectangle]) -> Tagged:
    """ Group the supplied *rectangles* by their own tag, preserving order.
    """

    tagged = dict()
    for rectangle in rectangles:
        tagged.setdefault(rectangle.tag, []).append(rectangle)
    return tagged


class RegionIndex:
    """ Group name -> tag -> list of :class:`Rectangle`. All mutation goes
        through the methods below, which mirror the incremental updates a
        server can send: full resync, whole-group replace or merge, bulk tag
        removal, and single tag replacement.
    """

    def __init__(self):
        self._groups = dict()


    def __contains__(self, group):
        return group in self._groups


    def __len__(self):
        return len(self._groups)


    def __repr__(self):
        return 'RegionIndex(%r)' % (self._groups,)


    def clear(self):
        self._groups = dict()


    def count(self, group=None):
        """ Return the number of rectangles in *group*, or across every group
            if no *group* is specified.
        """

        if group is not None:
            tagged = self._groups.get(group, {})
            return sum(len(ranges) for ranges in tagged.values())

        total = 0
        for tagged in self._groups.values():
            total += sum(len(ranges) for ranges in tagged.values())
        return total


    def groups(self):
        """ Return a copy of the index, safe for the caller to keep or modify.
        """

        copy = dict()
        for group, tagged in self._groups.items():
            copy[group] = {tag: list(ranges) for tag, ranges in tagged.items()}
        return copy


    def has_ranges(self):
        """ True if any group holds at least one rectangle.
        """

        for tagged in self._groups.values():
            for ranges in tagged.values():
                if ranges:
                    return True
        return False


    def is_covered(self, x, z):
        """ True if the chunk at (*x*, *z*) is inside any rectangle of any
            group or tag.
        """

        for tagged in self._groups.values():
            for ranges in tagged.values():
                for rectangle in ranges:
                    if rectangle.contains(x, z):
                        return True
        return False


    def replace_all(self, groups: Mapping[str, Union[Mapping[str, Sequence[Rectangle]], Sequence[Rectangle]]]):
        """ Discard every existing group and install *groups* in their place.
            Each value may already be keyed by tag, or be a flat sequence of
            rectangles that will be filed under their own tags.
        """

        replacement = dict()

        for group, entries in groups.items():
            if isinstance(entries, Mapping):
                tagged = {tag: list(ranges) for tag, ranges in entries.items()}
            else:
                tagged = bucket(entries)
            replacement[group] = tagged

        self._groups = replacement


    def update_group(self, group, replace, rectangles):
        """ If *replace* is True the named *group* becomes exactly the supplied
            *rectangles*. Otherwise they are merged in: existing tags keep
            their rectangles and gain any new ones carrying the same tag, new
            tags are added. A group that does not yet exist starts out empty.
        """

        if replace:
            tagged = dict()
        else:
            existing = self._groups.get(group, {})
            tagged = {tag: list(ranges) for tag, ranges in existing.items()}

        for rectangle in rectangles:
            tagged.setdefault(rectangle.tag, []).append(rectangle)

        self._swap(group, tagged)


    def remove_tags(self, group, tags):
        """ Remove every rectangle filed under any of the *tags* in *group*,
            returning how many were removed. Tags, or a group, that are not
            present contribute nothing.
        """

        existing = self._groups.get(group)
        if existing is None:
            return 0

        tagged = dict(existing)
        removed = 0
        for tag in tags:
            ranges = tagged.pop(tag, None)
            if ranges is not None:
                removed += len(ranges)

        self._swap(group, tagged)
        return removed


    def replace_tag(self, group, tag, rectangles):
        """ Replace everything under (*group*, *tag*) with *rectangles*,
            returning the number of rectangles that were there before. The
            new rectangles are filed under *tag* as given; their own tag is
            not checked against it. A missing *group* is created.
        """

        tagged = dict(self._groups.get(group, {}))
        previous = tagged.pop(tag, [])

        rectangles = list(rectangles)
        if rectangles:
            tagged[tag] = rectangles

        self._swap(group, tagged)
        return len(previous)


    def _swap(self, group, tagged):
        # Existing mappings are never mutated; a reader already iterating
        # over the old ones finishes undisturbed.
        groups = dict(self._groups)
        groups[group] = tagged
        self._groups = groups


# end of class RegionIndex


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
