import random
from datetime import time, timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from faker import Faker

from apps.core.academics.models import MODALITY_EAD, MODALITY_VIDEOCONFERENCE, CourseClass, Cycle
from apps.core.academics.services import create_course_with_modules, enroll_students
from apps.core.attendance.services import record_class_attendance, save_ead_access
from apps.core.students.models import Student, Unit
from apps.core.users.models import User
from apps.finance.cashflow.models import FixedExpense, Transaction
from apps.finance.invoices.models import Invoice
from apps.finance.invoices.services import create_invoice
from apps.finance.minutes.models import MeetingMinute


class Command(BaseCommand):
    help = 'Seeds the database with demo data.'

    def add_arguments(self, parser):
        parser.add_argument('--students', type=int, default=20)
        parser.add_argument('--seed', type=int, default=None)

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write('Seeding database...')

        fake = Faker('pt_BR')
        if options['seed'] is not None:
            Faker.seed(options['seed'])
            random.seed(options['seed'])

        if not User.objects.filter(username='superadmin').exists():
            User.objects.create_superuser('superadmin', 'superadmin@example.com', 'password')
            self.stdout.write(self.style.SUCCESS('Successfully created superadmin user.'))

        academic = self._user('academico', User.ROLE_ACADEMIC)
        financial = self._user('financeiro', User.ROLE_FINANCIAL)

        self._seed_academic(fake, academic, options['students'])
        self._seed_financial(fake, financial)

        self.stdout.write(self.style.SUCCESS('Seeding complete.'))

    def _user(self, username, role):
        user, created = User.objects.get_or_create(username=username, defaults={'role': role})
        if created:
            user.set_password('password')
            user.save()
            self.stdout.write(self.style.SUCCESS(f'Successfully created {role} user: {username}'))
        return user

    def _seed_academic(self, fake, owner, student_count):
        units = []
        for name in ['Unidade Centro', 'Unidade Norte']:
            unit, _ = Unit.objects.get_or_create(
                owner=owner,
                name=name,
                defaults={'address': fake.address(), 'phone': fake.phone_number()[:20]},
            )
            units.append(unit)

        students = []
        for _ in range(student_count):
            students.append(Student.objects.create(
                owner=owner,
                unit=random.choice(units + [None]),
                full_name=fake.name(),
                cpf=fake.cpf().replace('.', '').replace('-', ''),
                email=fake.email(),
                phone=fake.phone_number()[:20],
            ))
        self.stdout.write(self.style.SUCCESS(f'Successfully created {len(students)} students.'))

        today = timezone.localdate()
        cycle, _ = Cycle.objects.get_or_create(
            owner=owner,
            name=f'Ciclo {today.year}',
            defaults={'start_date': today - timedelta(days=120), 'end_date': today + timedelta(days=60)},
        )

        live_course = create_course_with_modules(
            owner=owner,
            name='Gestão de Projetos',
            teacher_name=fake.name(),
            workload=40,
            modality=MODALITY_VIDEOCONFERENCE,
            module_names=['Fundamentos', 'Planejamento', 'Execução', 'Encerramento'],
        )
        ead_course = create_course_with_modules(
            owner=owner,
            name='Informática Básica',
            teacher_name=fake.name(),
            workload=20,
            modality=MODALITY_EAD,
            module_names=['Sistema operacional', 'Editor de texto', 'Planilhas'],
        )

        live_class = CourseClass(
            owner=owner,
            cycle=cycle,
            course=live_course,
            name='Turma A - Noite',
            days_of_week=['segunda', 'quarta'],
            class_time=time(19, 0),
            total_classes=10,
        )
        live_class.full_clean()
        live_class.save()

        ead_class = CourseClass(owner=owner, cycle=cycle, course=ead_course, name='Turma EAD 1')
        ead_class.full_clean()
        ead_class.save()

        half = len(students) // 2
        enroll_students(course_class=live_class, students=students[:half])
        enroll_students(course_class=ead_class, students=students[half:])

        for number in range(1, 9):
            record_class_attendance(
                course_class=live_class,
                class_number=number,
                class_date=cycle.start_date + timedelta(days=7 * number),
                presence_by_student_id={student.id: random.random() < 0.75 for student in students[:half]},
            )

        for student in students[half:]:
            months = random.randint(1, 3)
            dates = [today - timedelta(days=31 * offset) for offset in range(months)]
            save_ead_access(course_class=ead_class, student=student, **{
                f'access_date_{index}': value for index, value in enumerate(dates, start=1)
            })

        self.stdout.write(self.style.SUCCESS('Successfully created courses, classes and attendance.'))

    def _seed_financial(self, fake, owner):
        today = timezone.localdate()

        for _ in range(12):
            is_income = random.random() < 0.5
            Transaction.objects.create(
                owner=owner,
                type=Transaction.TYPE_INCOME if is_income else Transaction.TYPE_EXPENSE,
                amount=Decimal(random.randint(100, 5000)),
                method=random.choice(['pix', 'transferencia']),
                category='' if is_income else random.choice([
                    Transaction.CATEGORY_FIXED,
                    Transaction.CATEGORY_VARIABLE,
                ]),
                description=fake.sentence(nb_words=4),
                transaction_date=today - timedelta(days=random.randint(0, 25)),
            )

        for name in ['Aluguel', 'Internet', 'Energia']:
            FixedExpense.objects.get_or_create(
                owner=owner,
                name=name,
                defaults={'amount': Decimal(random.randint(150, 3000))},
            )

        for _ in range(6):
            status = random.choice([choice[0] for choice in Invoice.STATUS_CHOICES])
            net_value = Decimal(random.randint(500, 9000))
            create_invoice(
                owner=owner,
                unit_name=fake.company(),
                cnpj_cpf=fake.cnpj(),
                exercise_month=today.month,
                exercise_year=today.year,
                invoice_number=str(fake.random_number(digits=6)),
                issue_date=today - timedelta(days=20),
                due_date=today + timedelta(days=10),
                net_value=net_value,
                payment_status=status,
                payment_date=today if status == Invoice.STATUS_PAID else None,
                paid_value=net_value if status == Invoice.STATUS_PAID else None,
            )

        MeetingMinute.objects.get_or_create(
            owner=owner,
            title=f'Reunião ordinária {today:%m/%Y}',
            defaults={'content': '\n\n'.join(fake.paragraphs(nb=4)), 'meeting_date': today},
        )
        self.stdout.write(self.style.SUCCESS('Successfully created financial data.'))
