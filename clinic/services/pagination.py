import math


def paginate(queryset, *, page: int, limit: int, formatter) -> dict:
    """Offset pagination: ``start = (page - 1) * limit``.

    A page past the end yields an empty ``data`` list, not an error.
    """
    total = queryset.count()
    start = (page - 1) * limit
    rows = [formatter(obj) for obj in queryset[start:start + limit]]
    return {
        'data': rows,
        'pagination': {
            'page': page,
            'limit': limit,
            'total': total,
            'totalPages': math.ceil(total / limit),
        },
    }
