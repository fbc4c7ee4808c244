from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from apps.core.utils.managers import OwnerManager


class Unit(models.Model):
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='units',
    )
    objects = OwnerManager()

    name = models.CharField(max_length=255)
    address = models.TextField(blank=True)
    phone = models.CharField(max_length=20, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['owner', 'name'],
                name='unique_unit_name_per_owner',
            ),
        ]

    def clean(self):
        super().clean()
        if self.name:
            self.name = self.name.strip()
        if not self.name:
            raise ValidationError({'name': 'Informe o nome da unidade.'})

    def delete(self, *args, **kwargs):
        if self.students.exists():
            raise ValidationError('Não é possível excluir uma unidade com alunos vinculados.')
        if self.is_active:
            self.is_active = False
            self.save(update_fields=['is_active'])

    def __str__(self):
        return self.name


class Student(models.Model):
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='students',
    )
    objects = OwnerManager()

    unit = models.ForeignKey(
        Unit,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='students',
    )
    full_name = models.CharField(max_length=255)
    cpf = models.CharField(max_length=14, blank=True)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=20, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['full_name', 'id']
        indexes = [
            models.Index(fields=['owner', 'full_name'], name='students_st_owner_i_5c1d2e_idx'),
            models.Index(fields=['owner', 'unit'], name='students_st_owner_i_9a7b3f_idx'),
        ]

    def clean(self):
        super().clean()
        if self.full_name:
            self.full_name = ' '.join(self.full_name.split())
        if not self.full_name:
            raise ValidationError({'full_name': 'Informe o nome completo do aluno.'})

        if self.cpf:
            digits = ''.join(ch for ch in self.cpf if ch.isdigit())
            if len(digits) != 11:
                raise ValidationError({'cpf': 'CPF deve conter 11 dígitos.'})
            self.cpf = digits

        if self.unit_id and self.owner_id and self.unit.owner_id != self.owner_id:
            raise ValidationError({'unit': 'A unidade selecionada não pertence a este usuário.'})

    @property
    def unit_name(self):
        return self.unit.name if self.unit_id else 'Não informado'

    def __str__(self):
        return self.full_name
