import re
from collections import namedtuple
from enum import Enum
from run_info_extractor.exceptions import ReadStructureError


class SegmentType(Enum):
    Template = 'T'
    SampleBarcode = 'B'
    MolecularBarcode = 'M'
    Skip = 'S'

    @property
    def code(self):
        return self.value

    @classmethod
    def from_code(cls, code):
        try:
            return cls(code)
        except ValueError:
            raise ReadStructureError('Unknown read segment type: ' + repr(code))


class ReadSegment(namedtuple('ReadSegment', ('offset', 'length', 'type'))):
    """A contiguous block of cycles within a read structure, e.g. the 8 cycles of an index read."""
    __slots__ = ()

    def with_offset(self, offset):
        return self._replace(offset=offset)

    @property
    def end(self):
        return self.offset + self.length

    def __str__(self):
        return str(self.length) + self.type.code


def Template(length, offset=0):
    return ReadSegment(offset, length, SegmentType.Template)


def SampleBarcode(length, offset=0):
    return ReadSegment(offset, length, SegmentType.SampleBarcode)


class ReadStructure:
    """
    Ordered, immutable description of the cycles of a sequencing run, rendered as concatenated
    '<length><code>' tokens, e.g. '76T8B76T' for a paired-end run with an 8-cycle index read.
    """
    token_pattern = re.compile(r'(\d+)([A-Z])')

    def __init__(self, segments, reset_offsets=False):
        """
        :param segments: ReadSegment objects, in cycle order
        :param bool reset_offsets: recompute each offset as the total length of the preceding segments.
                                   Otherwise, the given offsets must already start at 0 and be contiguous.
        """
        segments = list(segments)
        for s in segments:
            if s.length < 1:
                raise ReadStructureError('Read segment length must be positive: %s' % (s,))

        if reset_offsets:
            segments = self._contiguous(segments)
        else:
            offset = 0
            for s in segments:
                if s.offset != offset:
                    raise ReadStructureError(
                        'Read segment %s starts at cycle offset %s, expected %s' % (s, s.offset, offset)
                    )
                offset = s.end

        self.segments = tuple(segments)

    @staticmethod
    def _contiguous(segments):
        offset = 0
        out = []
        for s in segments:
            out.append(s.with_offset(offset))
            offset += s.length
        return out

    @classmethod
    def from_string(cls, read_structure):
        """Parse a string such as '76T8B76T' back into a ReadStructure."""
        text = re.sub(r'\s', '', read_structure).upper()
        tokens = cls.token_pattern.findall(text)
        if not tokens or ''.join(length + code for length, code in tokens) != text:
            raise ReadStructureError('Could not parse read structure: ' + repr(read_structure))

        segments = []
        for length, code in tokens:
            if int(length) < 1:
                raise ReadStructureError('Read segment length must be positive in: ' + repr(read_structure))
            segments.append(ReadSegment(0, int(length), SegmentType.from_code(code)))

        return cls(segments, reset_offsets=True)

    @property
    def total_cycles(self):
        return sum(s.length for s in self.segments)

    def segments_by_type(self, segment_type):
        return [s for s in self.segments if s.type is segment_type]

    @property
    def template_segments(self):
        return self.segments_by_type(SegmentType.Template)

    @property
    def sample_barcode_segments(self):
        return self.segments_by_type(SegmentType.SampleBarcode)

    def __len__(self):
        return len(self.segments)

    def __iter__(self):
        return iter(self.segments)

    def __getitem__(self, item):
        return self.segments[item]

    def __eq__(self, other):
        if not isinstance(other, ReadStructure):
            return NotImplemented
        return self.segments == other.segments

    def __hash__(self):
        return hash(self.segments)

    def __str__(self):
        return ''.join(str(s) for s in self.segments)

    def __repr__(self):
        return '%s(%r)' % (self.__class__.__name__, str(self))
