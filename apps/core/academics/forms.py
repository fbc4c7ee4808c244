from django import forms
from django.core.exceptions import ValidationError

from apps.core.students.models import Student

from .models import DAY_CHOICES, STATUS_ACTIVE, Course, CourseClass, Cycle, Enrollment


class CourseForm(forms.ModelForm):
    modules = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={'rows': 6}),
        help_text='Um módulo por linha, na ordem em que aparecem no certificado.',
    )

    class Meta:
        model = Course
        fields = ['name', 'teacher_name', 'workload', 'modality']

    def __init__(self, *args, **kwargs):
        self.owner = kwargs.pop('owner', None)
        super().__init__(*args, **kwargs)
        if self.owner and not self.instance.owner_id:
            self.instance.owner = self.owner
        if self.instance.pk and not self.is_bound:
            self.initial.setdefault('modules', '\n'.join(self.instance.module_names))

    def clean_workload(self):
        workload = self.cleaned_data.get('workload')
        if workload is not None and workload <= 0:
            raise ValidationError('A carga horária deve ser maior que zero.')
        return workload

    def module_names(self):
        raw = self.cleaned_data.get('modules') or ''
        return [line.strip() for line in raw.splitlines() if line.strip()]


class CycleForm(forms.ModelForm):
    class Meta:
        model = Cycle
        fields = ['name', 'start_date', 'end_date']
        widgets = {
            'start_date': forms.DateInput(attrs={'type': 'date'}),
            'end_date': forms.DateInput(attrs={'type': 'date'}),
        }

    def __init__(self, *args, **kwargs):
        self.owner = kwargs.pop('owner', None)
        super().__init__(*args, **kwargs)
        if self.owner and not self.instance.owner_id:
            self.instance.owner = self.owner


class CourseClassForm(forms.ModelForm):
    days_of_week = forms.MultipleChoiceField(
        choices=DAY_CHOICES,
        required=False,
        widget=forms.CheckboxSelectMultiple,
    )

    class Meta:
        model = CourseClass
        fields = ['cycle', 'course', 'name', 'days_of_week', 'class_time', 'total_classes']
        widgets = {
            'class_time': forms.TimeInput(attrs={'type': 'time'}),
        }

    def __init__(self, *args, **kwargs):
        self.owner = kwargs.pop('owner', None)
        super().__init__(*args, **kwargs)

        if self.owner and not self.instance.owner_id:
            self.instance.owner = self.owner

        self.fields['cycle'].queryset = Cycle.objects.none()
        self.fields['course'].queryset = Course.objects.none()
        if self.owner:
            cycles = Cycle.objects.for_owner(self.owner)
            if not self.instance.pk:
                cycles = cycles.filter(status=STATUS_ACTIVE)
            self.fields['cycle'].queryset = cycles.order_by('-start_date')
            self.fields['course'].queryset = Course.objects.for_owner(self.owner).order_by('name')

        # EAD classes ignore schedule and session count.
        self.fields['total_classes'].required = False

        # The modality of an existing class never changes, so neither does its course.
        if self.instance.pk:
            self.fields['course'].disabled = True


class EnrollmentForm(forms.Form):
    students = forms.ModelMultipleChoiceField(
        queryset=Student.objects.none(),
        widget=forms.CheckboxSelectMultiple,
    )
    enrollment_type = forms.ChoiceField(choices=Enrollment.TYPE_CHOICES, initial=Enrollment.TYPE_REGULAR)
    enrollment_date = forms.DateField(required=False, widget=forms.DateInput(attrs={'type': 'date'}))

    def __init__(self, *args, **kwargs):
        self.course_class = kwargs.pop('course_class', None)
        self.student_queryset = kwargs.pop('student_queryset', None)
        super().__init__(*args, **kwargs)
        if self.student_queryset is not None:
            self.fields['students'].queryset = self.student_queryset

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('enrollment_type') == Enrollment.TYPE_EXCEPTIONAL and not cleaned_data.get('enrollment_date'):
            raise ValidationError('Matrícula excepcional exige a data de matrícula.')
        return cleaned_data


class StudentLookupForm(forms.Form):
    q = forms.CharField(required=False)
