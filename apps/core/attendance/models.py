from django.core.exceptions import ValidationError
from django.db import models

from apps.core.academics.models import CourseClass, Enrollment
from apps.core.students.models import Student


class AttendanceEntry(models.Model):
    course_class = models.ForeignKey(
        CourseClass,
        on_delete=models.CASCADE,
        related_name='attendance_entries',
    )
    student = models.ForeignKey(
        Student,
        on_delete=models.CASCADE,
        related_name='attendance_entries',
    )
    class_number = models.PositiveIntegerField()
    class_date = models.DateField()
    present = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['class_number', 'class_date']
        constraints = [
            models.UniqueConstraint(
                fields=['course_class', 'student', 'class_number'],
                name='unique_attendance_per_class_number',
            ),
        ]
        indexes = [
            models.Index(fields=['course_class', 'student', 'class_date'], name='attendance_entry_student_idx'),
            models.Index(fields=['course_class', 'class_date'], name='attendance_entry_date_idx'),
        ]

    def clean(self):
        super().clean()

        if self.class_number is not None and self.class_number < 1:
            raise ValidationError({'class_number': 'O número da aula deve ser maior ou igual a 1.'})

        if self.course_class_id:
            if not self.course_class.is_videoconference:
                raise ValidationError('Frequência por aula só se aplica a turmas de videoconferência.')
            total = self.course_class.total_classes
            if self.class_number and total and self.class_number > total:
                raise ValidationError({'class_number': f'A turma possui apenas {total} aulas.'})

        if self.course_class_id and self.student_id:
            if not Enrollment.objects.filter(course_class=self.course_class, student=self.student).exists():
                raise ValidationError('Aluno não está matriculado nesta turma.')

    def __str__(self):
        state = 'presente' if self.present else 'ausente'
        return f"{self.student.full_name} - aula {self.class_number} ({self.class_date}) {state}"


class EadAccess(models.Model):
    course_class = models.ForeignKey(
        CourseClass,
        on_delete=models.CASCADE,
        related_name='ead_accesses',
    )
    student = models.ForeignKey(
        Student,
        on_delete=models.CASCADE,
        related_name='ead_accesses',
    )
    access_date_1 = models.DateField(null=True, blank=True)
    access_date_2 = models.DateField(null=True, blank=True)
    access_date_3 = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['student__full_name', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['course_class', 'student'],
                name='unique_ead_access_per_student',
            ),
        ]

    @property
    def access_dates(self):
        return [self.access_date_1, self.access_date_2, self.access_date_3]

    def clean(self):
        super().clean()
        if self.course_class_id and not self.course_class.is_ead:
            raise ValidationError('Controle de acessos só se aplica a turmas EAD.')

    def __str__(self):
        return f"{self.student.full_name} - acessos EAD"
