from django.db import IntegrityError, transaction
from django.db.models import ProtectedError, RestrictedError

from .exceptions import ConflictError
from .pagination import get_skip


class BaseRepository:
    """
    CRUD over one Django model that only ever hands entities back to callers.

    Subclasses set ``model``, implement ``to_entity`` / ``to_fields`` and may
    extend ``sort_fields`` (API sort key -> model field).
    """

    model = None
    conflict_message = "Resource already exists."
    protected_message = "Resource is still referenced and cannot be deleted."
    sort_fields = {
        "createdAt": "created_at",
        "updatedAt": "updated_at",
    }
    default_sort_field = "created_at"

    def to_entity(self, instance):
        raise NotImplementedError

    def to_fields(self, entity):
        raise NotImplementedError

    def get_queryset(self):
        return self.model.objects.all()

    def find_by_id(self, pk, for_update=False):
        queryset = self.get_queryset()
        if for_update:
            queryset = queryset.select_for_update()
        instance = queryset.filter(pk=pk).first()
        return self.to_entity(instance) if instance else None

    def find_one(self, *args, **filters):
        instance = self.get_queryset().filter(*args, **filters).first()
        return self.to_entity(instance) if instance else None

    def find_all(self, *args, **filters):
        return [self.to_entity(instance) for instance in self.get_queryset().filter(*args, **filters)]

    def exists(self, *args, **filters):
        return self.get_queryset().filter(*args, **filters).exists()

    def count(self, *args, **filters):
        return self.get_queryset().filter(*args, **filters).count()

    def create(self, entity):
        try:
            # savepoint, so a conflict does not poison an enclosing transaction
            with transaction.atomic():
                instance = self.model.objects.create(**self.to_fields(entity))
        except IntegrityError as e:
            raise ConflictError(self.conflict_message) from e
        return self.to_entity(instance)

    def update(self, pk, **fields):
        instance = self.get_queryset().filter(pk=pk).first()
        if instance is None:
            return None
        for name, value in fields.items():
            setattr(instance, name, value)
        try:
            with transaction.atomic():
                instance.save()
        except IntegrityError as e:
            raise ConflictError(self.conflict_message) from e
        return self.to_entity(instance)

    def delete(self, pk):
        try:
            deleted, _ = self.get_queryset().filter(pk=pk).delete()
        except (ProtectedError, RestrictedError) as e:
            raise ConflictError(self.protected_message) from e
        return deleted > 0

    def paginate(self, *args, page=1, limit=10, sort_by="createdAt", sort_order="desc", **filters):
        """Return ``(entities, total)`` for one page of the filtered queryset."""
        skip = get_skip(page, limit)
        field = self.sort_fields.get(sort_by, self.default_sort_field)
        ordering = field if sort_order == "asc" else f"-{field}"

        queryset = self.get_queryset().filter(*args, **filters).order_by(ordering, "-pk")
        total = queryset.count()
        items = [self.to_entity(instance) for instance in queryset[skip:skip + limit]]
        return items, total
