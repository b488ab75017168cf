class RequestIdFilter:
    """
    Fill request context attributes on a log record.
    Records emitted outside a request get '-' placeholders.
    """
    DEFAULTS = {
        'request_id': '-',
        'user': '-',
        'ip': '-',
        'method': '-',
        'path': '-',
        'status': '-',
        'duration_ms': '-',
    }

    def filter(self, record):
        for attr, default in self.DEFAULTS.items():
            if not hasattr(record, attr):
                setattr(record, attr, default)

        record.status_color = ''
        # 2xx green, 4xx yellow, 5xx red
        try:
            status = int(record.status)
        except (TypeError, ValueError):
            return True
        if 200 <= status < 300:
            record.status_color = '\x1b[32m'
        elif 400 <= status < 500:
            record.status_color = '\x1b[33m'
        elif 500 <= status < 600:
            record.status_color = '\x1b[31m'
        return True
