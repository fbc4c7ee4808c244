from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from apps.core.attendance.eligibility import (
    ENROLLMENT_EXCEPTIONAL,
    ENROLLMENT_REGULAR,
    MODALITY_EAD,
    MODALITY_VIDEOCONFERENCE,
)
from apps.core.students.models import Student
from apps.core.utils.managers import OwnerManager


MODALITY_CHOICES = (
    (MODALITY_VIDEOCONFERENCE, 'Videoconferência'),
    (MODALITY_EAD, 'EAD 24h'),
)

DAY_CHOICES = (
    ('segunda', 'Segunda-feira'),
    ('terca', 'Terça-feira'),
    ('quarta', 'Quarta-feira'),
    ('quinta', 'Quinta-feira'),
    ('sexta', 'Sexta-feira'),
    ('sabado', 'Sábado'),
    ('domingo', 'Domingo'),
)

STATUS_ACTIVE = 'active'
STATUS_CLOSED = 'closed'
STATUS_CHOICES = (
    (STATUS_ACTIVE, 'Ativo'),
    (STATUS_CLOSED, 'Encerrado'),
)


class Course(models.Model):
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='courses',
    )
    objects = OwnerManager()

    name = models.CharField(max_length=255)
    teacher_name = models.CharField(max_length=255, blank=True)
    workload = models.PositiveIntegerField(help_text='Carga horária em horas')
    modality = models.CharField(max_length=20, choices=MODALITY_CHOICES, default=MODALITY_VIDEOCONFERENCE)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name', 'id']
        indexes = [
            models.Index(fields=['owner', 'modality'], name='academics_course_owner_mod_idx'),
        ]

    def clean(self):
        super().clean()
        if self.name:
            self.name = self.name.strip()
        if not self.name:
            raise ValidationError({'name': 'Informe o nome do curso.'})
        if self.workload is not None and self.workload <= 0:
            raise ValidationError({'workload': 'A carga horária deve ser maior que zero.'})

    @property
    def module_names(self):
        return list(self.modules.order_by('order_number', 'id').values_list('name', flat=True))

    def __str__(self):
        return f"{self.name} ({self.get_modality_display()})"


class CourseModule(models.Model):
    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name='modules',
    )
    name = models.CharField(max_length=255)
    order_number = models.PositiveIntegerField()

    class Meta:
        ordering = ['order_number', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['course', 'order_number'],
                name='unique_module_order_per_course',
            ),
        ]

    def __str__(self):
        return f"{self.order_number}. {self.name}"


class Cycle(models.Model):
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='cycles',
    )
    objects = OwnerManager()

    name = models.CharField(max_length=120)
    start_date = models.DateField()
    end_date = models.DateField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-start_date', '-id']
        constraints = [
            models.CheckConstraint(
                condition=Q(end_date__gt=F('start_date')),
                name='cycle_end_after_start',
            ),
        ]
        indexes = [
            models.Index(fields=['owner', 'status'], name='academics_cycle_owner_st_idx'),
        ]

    def clean(self):
        super().clean()
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValidationError({'end_date': 'A data de término deve ser posterior à data de início.'})

    @property
    def is_closed(self):
        return self.status == STATUS_CLOSED

    def __str__(self):
        return self.name


class CourseClass(models.Model):
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='course_classes',
    )
    objects = OwnerManager()

    cycle = models.ForeignKey(
        Cycle,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='classes',
    )
    course = models.ForeignKey(
        Course,
        on_delete=models.PROTECT,
        related_name='classes',
    )
    name = models.CharField(max_length=255)
    modality = models.CharField(max_length=20, choices=MODALITY_CHOICES, default=MODALITY_VIDEOCONFERENCE)
    days_of_week = models.JSONField(default=list, blank=True)
    class_time = models.TimeField(null=True, blank=True)
    total_classes = models.PositiveIntegerField(default=1)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['owner', 'status'], name='academics_class_owner_st_idx'),
            models.Index(fields=['owner', 'cycle'], name='academics_class_owner_cy_idx'),
        ]

    @property
    def is_closed(self):
        return self.status == STATUS_CLOSED

    @property
    def is_ead(self):
        return self.modality == MODALITY_EAD

    @property
    def is_videoconference(self):
        return self.modality == MODALITY_VIDEOCONFERENCE

    def clean(self):
        super().clean()
        if self.name:
            self.name = self.name.strip()
        if not self.name:
            raise ValidationError({'name': 'Informe o nome da turma.'})

        if self.course_id and self.owner_id and self.course.owner_id != self.owner_id:
            raise ValidationError({'course': 'O curso selecionado não pertence a este usuário.'})
        if self.cycle_id and self.owner_id and self.cycle.owner_id != self.owner_id:
            raise ValidationError({'cycle': 'O ciclo selecionado não pertence a este usuário.'})
        if self.cycle_id and not self.pk and self.cycle.is_closed:
            raise ValidationError({'cycle': 'Não é possível criar turmas em um ciclo encerrado.'})

        if self.course_id and not self.pk:
            self.modality = self.course.modality

        allowed_days = {choice[0] for choice in DAY_CHOICES}
        invalid_days = [day for day in (self.days_of_week or []) if day not in allowed_days]
        if invalid_days:
            raise ValidationError({'days_of_week': f'Dias inválidos: {", ".join(invalid_days)}'})

        if self.modality == MODALITY_VIDEOCONFERENCE:
            if not self.class_time:
                raise ValidationError({'class_time': 'Informe o horário da aula.'})
            if not self.total_classes or self.total_classes <= 0:
                raise ValidationError({'total_classes': 'Informe um número válido de aulas (maior que 0).'})
        else:
            self.days_of_week = []
            self.class_time = None
            self.total_classes = 1

    def __str__(self):
        return f"{self.name} - {self.course.name}"


class Enrollment(models.Model):
    TYPE_REGULAR = ENROLLMENT_REGULAR
    TYPE_EXCEPTIONAL = ENROLLMENT_EXCEPTIONAL
    TYPE_CHOICES = (
        (TYPE_REGULAR, 'Regular'),
        (TYPE_EXCEPTIONAL, 'Excepcional'),
    )

    course_class = models.ForeignKey(
        CourseClass,
        on_delete=models.CASCADE,
        related_name='enrollments',
    )
    student = models.ForeignKey(
        Student,
        on_delete=models.CASCADE,
        related_name='enrollments',
    )
    enrollment_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_REGULAR)
    enrollment_date = models.DateField(default=timezone.localdate, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['student__full_name', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['course_class', 'student'],
                name='unique_student_per_class',
            ),
            models.CheckConstraint(
                condition=Q(enrollment_type='regular') | Q(enrollment_date__isnull=False),
                name='exceptional_enrollment_has_date',
            ),
        ]

    @property
    def is_exceptional(self):
        return self.enrollment_type == self.TYPE_EXCEPTIONAL

    def clean(self):
        super().clean()
        if self.is_exceptional and not self.enrollment_date:
            raise ValidationError({'enrollment_date': 'Matrícula excepcional exige a data de matrícula.'})
        if self.course_class_id and self.student_id:
            if self.course_class.owner_id != self.student.owner_id:
                raise ValidationError({'student': 'O aluno não pertence a este usuário.'})

    def __str__(self):
        return f"{self.student.full_name} @ {self.course_class.name} ({self.enrollment_type})"
