class OrderTallyError(Exception):
    pass


class MalformedSourceError(OrderTallyError):
    """The input could not be read as a well-formed document at all."""


class UnsupportedFormatError(OrderTallyError):
    pass


class DuplicateReportError(OrderTallyError):
    def __init__(self, report_name: str) -> None:
        super().__init__(f'Report "{report_name}" has been created already!')
        self.report_name = report_name
