from django.db import models
from django.utils import timezone

from apps.core.academics.models import CourseClass
from apps.core.students.models import Student


class Certificate(models.Model):
    course_class = models.ForeignKey(
        CourseClass,
        on_delete=models.CASCADE,
        related_name='certificates',
    )
    student = models.ForeignKey(
        Student,
        on_delete=models.CASCADE,
        related_name='certificates',
    )
    issue_date = models.DateField(default=timezone.localdate)
    attendance_percentage = models.DecimalField(max_digits=5, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-issue_date', '-id']
        constraints = [
            models.UniqueConstraint(
                fields=['course_class', 'student'],
                name='unique_certificate_per_student_class',
            ),
        ]

    def __str__(self):
        return f"{self.student.full_name} - {self.course_class.name} ({self.issue_date})"
