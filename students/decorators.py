from functools import wraps

from django.http import JsonResponse

from .permissions import can_view_student, current_student, is_reviewer


def require_student_access(param: str = "student_id"):
    """
    Guard views that expose one student's data.
    Reads the id from URL kwargs (default) or GET; without one, the requesting
    user's own student record is used and passed on as ``student_id``.
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            sid = kwargs.get(param) or request.GET.get(param)
            if not sid:
                student = current_student(request.user)
                if not student:
                    return JsonResponse({"errors": ["No student profile linked to this account"]}, status=403)
                sid = student.id
            if not can_view_student(request.user, sid):
                return JsonResponse({"errors": ["Not authorized"]}, status=403)
            kwargs[param] = sid
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator


def require_reviewer(view_func):
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not is_reviewer(request.user):
            return JsonResponse({"errors": ["Not authorized"]}, status=403)
        return view_func(request, *args, **kwargs)
    return _wrapped
