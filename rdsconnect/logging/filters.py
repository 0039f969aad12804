"""Route log records to stdout or stderr."""

import logging


class StreamRoutingFilter(logging.Filter):
    """Filter that routes log records based on stream extra parameter.

    Progress lines meant for the user (the chosen target, the launched
    client) are logged with ``extra={"stream": "stdout"}``. Everything else
    goes to stderr, so diagnostics never mix with that output.

    Parameters
    ----------
    stream_type : str
        Stream type to allow: "stdout" or "stderr"
    """

    def __init__(self, stream_type: str) -> None:
        super().__init__()
        self.stream_type = stream_type

    def filter(self, record: logging.LogRecord) -> bool:
        record_stream = getattr(record, "stream", None)

        if record_stream is None:
            return self.stream_type == "stderr"

        return record_stream == self.stream_type
