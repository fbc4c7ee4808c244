from datetime import date

from django import forms
from django.core.exceptions import ValidationError

from apps.core.academics.models import MODALITY_CHOICES, CourseClass, Cycle
from apps.core.students.models import Unit

from .models import AttendanceEntry


class ClassSessionForm(forms.Form):
    class_number = forms.IntegerField(min_value=1)
    class_date = forms.DateField(initial=date.today, widget=forms.DateInput(attrs={'type': 'date'}))

    def __init__(self, *args, **kwargs):
        self.course_class = kwargs.pop('course_class', None)
        super().__init__(*args, **kwargs)
        if self.course_class:
            self.fields['class_number'].max_value = self.course_class.total_classes
            self.fields['class_number'].widget.attrs['max'] = self.course_class.total_classes

    def clean_class_number(self):
        class_number = self.cleaned_data.get('class_number')
        if self.course_class and class_number and class_number > self.course_class.total_classes:
            raise ValidationError(f'A turma possui apenas {self.course_class.total_classes} aulas.')
        return class_number


class AttendanceEntryForm(forms.ModelForm):
    class Meta:
        model = AttendanceEntry
        fields = ['class_number', 'class_date', 'present']
        widgets = {
            'class_date': forms.DateInput(attrs={'type': 'date'}),
        }


class EadAccessForm(forms.Form):
    access_date_1 = forms.DateField(required=False, widget=forms.DateInput(attrs={'type': 'date'}))
    access_date_2 = forms.DateField(required=False, widget=forms.DateInput(attrs={'type': 'date'}))
    access_date_3 = forms.DateField(required=False, widget=forms.DateInput(attrs={'type': 'date'}))


class AttendanceReportForm(forms.Form):
    cycle = forms.ModelChoiceField(queryset=Cycle.objects.none(), required=False)
    course_class = forms.ModelChoiceField(queryset=CourseClass.objects.none(), required=False, label='Turma')
    modality = forms.ChoiceField(choices=(('', 'Todas'),) + MODALITY_CHOICES, required=False)
    unit = forms.ModelChoiceField(queryset=Unit.objects.none(), required=False)
    student_name = forms.CharField(required=False)
    date_from = forms.DateField(required=False, widget=forms.DateInput(attrs={'type': 'date'}))
    date_to = forms.DateField(required=False, widget=forms.DateInput(attrs={'type': 'date'}))

    def __init__(self, *args, **kwargs):
        self.owner = kwargs.pop('owner', None)
        super().__init__(*args, **kwargs)

        if not self.owner:
            return

        self.fields['cycle'].queryset = Cycle.objects.for_owner(self.owner).order_by('-start_date')
        classes = CourseClass.objects.for_owner(self.owner).select_related('course').order_by('name')
        if self.is_bound and str(self.data.get('cycle') or '').isdigit():
            classes = classes.filter(cycle_id=int(self.data['cycle']))
        self.fields['course_class'].queryset = classes
        self.fields['unit'].queryset = Unit.objects.for_owner(self.owner).order_by('name')

    def clean(self):
        cleaned_data = super().clean()
        date_from = cleaned_data.get('date_from')
        date_to = cleaned_data.get('date_to')
        if date_from and date_to and date_from > date_to:
            raise ValidationError('A data inicial deve ser anterior ou igual à data final.')
        return cleaned_data
