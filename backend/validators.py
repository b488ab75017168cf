from .exceptions import AlreadyExists


def ensure_unique(queryset, message, instance=None):
    """
    Raise AlreadyExists when `queryset` matches a record other than `instance`.
    """
    if instance is not None and instance.pk:
        queryset = queryset.exclude(pk=instance.pk)
    if queryset.exists():
        raise AlreadyExists(message)
