import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('academics', '0001_initial'),
        ('students', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='AttendanceEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('class_number', models.PositiveIntegerField()),
                ('class_date', models.DateField()),
                ('present', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('course_class', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='attendance_entries', to='academics.courseclass')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='attendance_entries', to='students.student')),
            ],
            options={
                'ordering': ['class_number', 'class_date'],
                'constraints': [
                    models.UniqueConstraint(fields=('course_class', 'student', 'class_number'), name='unique_attendance_per_class_number'),
                ],
                'indexes': [
                    models.Index(fields=['course_class', 'student', 'class_date'], name='attendance_entry_student_idx'),
                    models.Index(fields=['course_class', 'class_date'], name='attendance_entry_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='EadAccess',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('access_date_1', models.DateField(blank=True, null=True)),
                ('access_date_2', models.DateField(blank=True, null=True)),
                ('access_date_3', models.DateField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('course_class', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ead_accesses', to='academics.courseclass')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ead_accesses', to='students.student')),
            ],
            options={
                'ordering': ['student__full_name', 'id'],
                'constraints': [
                    models.UniqueConstraint(fields=('course_class', 'student'), name='unique_ead_access_per_student'),
                ],
            },
        ),
    ]
