import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('students', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Course',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('teacher_name', models.CharField(blank=True, max_length=255)),
                ('workload', models.PositiveIntegerField(help_text='Carga horária em horas')),
                ('modality', models.CharField(choices=[('videoconference', 'Videoconferência'), ('ead', 'EAD 24h')], default='videoconference', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='courses', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['name', 'id'],
                'indexes': [
                    models.Index(fields=['owner', 'modality'], name='academics_course_owner_mod_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CourseModule',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('order_number', models.PositiveIntegerField()),
                ('course', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='modules', to='academics.course')),
            ],
            options={
                'ordering': ['order_number', 'id'],
                'constraints': [
                    models.UniqueConstraint(fields=('course', 'order_number'), name='unique_module_order_per_course'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Cycle',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=120)),
                ('start_date', models.DateField()),
                ('end_date', models.DateField()),
                ('status', models.CharField(choices=[('active', 'Ativo'), ('closed', 'Encerrado')], default='active', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='cycles', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-start_date', '-id'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('end_date__gt', models.F('start_date'))), name='cycle_end_after_start'),
                ],
                'indexes': [
                    models.Index(fields=['owner', 'status'], name='academics_cycle_owner_st_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CourseClass',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('modality', models.CharField(choices=[('videoconference', 'Videoconferência'), ('ead', 'EAD 24h')], default='videoconference', max_length=20)),
                ('days_of_week', models.JSONField(blank=True, default=list)),
                ('class_time', models.TimeField(blank=True, null=True)),
                ('total_classes', models.PositiveIntegerField(default=1)),
                ('status', models.CharField(choices=[('active', 'Ativo'), ('closed', 'Encerrado')], default='active', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('course', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='classes', to='academics.course')),
                ('cycle', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='classes', to='academics.cycle')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='course_classes', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['owner', 'status'], name='academics_class_owner_st_idx'),
                    models.Index(fields=['owner', 'cycle'], name='academics_class_owner_cy_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Enrollment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('enrollment_type', models.CharField(choices=[('regular', 'Regular'), ('exceptional', 'Excepcional')], default='regular', max_length=20)),
                ('enrollment_date', models.DateField(blank=True, default=django.utils.timezone.localdate, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('course_class', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='enrollments', to='academics.courseclass')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='enrollments', to='students.student')),
            ],
            options={
                'ordering': ['student__full_name', 'id'],
                'constraints': [
                    models.UniqueConstraint(fields=('course_class', 'student'), name='unique_student_per_class'),
                    models.CheckConstraint(condition=models.Q(('enrollment_type', 'regular'), ('enrollment_date__isnull', False), _connector='OR'), name='exceptional_enrollment_has_date'),
                ],
            },
        ),
    ]
