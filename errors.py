from _package_tools import Exporter

exporter = Exporter(globals())

@exporter.export
class DPRError(Exception):
    pass

@exporter.export
class TruncatedInput(DPRError, EOFError):
    def __init__(self, requested, available):
        self.requested = requested
        self.available = available
        super(TruncatedInput, self).__init__('Truncated input: needed {:d} bytes, but only {:d} remain'.format(requested, available))

@exporter.export
class InvalidFixedWidthSlice(DPRError):
    pass

@exporter.export
class InvalidText(DPRError, ValueError):
    pass

@exporter.export
class ValueOutOfRange(DPRError, ValueError):
    def __init__(self, field, value, expected):
        self.field = field
        self.value = value
        self.expected = expected
        super(ValueOutOfRange, self).__init__('Value out of specified range: {} got {}, expected {}'.format(field, value, expected))

@exporter.export
class InvalidOperationalMode(ValueOutOfRange):
    pass

@exporter.export
class InvalidCaptureTime(DPRError, ValueError):
    def __init__(self, value):
        self.value = value
        super(InvalidCaptureTime, self).__init__('Failed to parse capture time: 0x{:08x}'.format(value))

@exporter.export
class DecompressionFailed(DPRError):
    pass

@exporter.export
class Unsupported(DPRError, NotImplementedError):
    pass
