from django.db import models

class OwnerQuerySet(models.QuerySet):
    def for_owner(self, owner):
        return self.filter(owner=owner)


class OwnerManager(models.Manager):
    def get_queryset(self):
        return OwnerQuerySet(self.model, using=self._db)

    def for_owner(self, owner):
        return self.get_queryset().for_owner(owner)
