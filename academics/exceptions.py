from django.core.exceptions import ObjectDoesNotExist


class NotFound(ObjectDoesNotExist):
    """A referenced student, group or request does not exist."""
