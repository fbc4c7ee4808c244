from django import forms

from .models import Student, Unit


class UnitForm(forms.ModelForm):
    class Meta:
        model = Unit
        fields = ['name', 'address', 'phone', 'is_active']

    def __init__(self, *args, **kwargs):
        self.owner = kwargs.pop('owner', None)
        super().__init__(*args, **kwargs)
        if self.owner and not self.instance.owner_id:
            self.instance.owner = self.owner

    def clean_name(self):
        name = (self.cleaned_data.get('name') or '').strip()
        owner = self.owner or self.instance.owner
        duplicates = Unit.objects.for_owner(owner).filter(name__iexact=name).exclude(pk=self.instance.pk)
        if name and duplicates.exists():
            raise forms.ValidationError('Já existe uma unidade com este nome.')
        return name


class StudentForm(forms.ModelForm):
    class Meta:
        model = Student
        fields = ['full_name', 'cpf', 'email', 'phone', 'unit']

    def __init__(self, *args, **kwargs):
        self.owner = kwargs.pop('owner', None)
        super().__init__(*args, **kwargs)

        # Model validation compares unit owner, so the owner is set before is_valid().
        if self.owner and not self.instance.owner_id:
            self.instance.owner = self.owner

        self.fields['unit'].queryset = Unit.objects.none()
        if self.owner:
            self.fields['unit'].queryset = Unit.objects.for_owner(self.owner).filter(
                is_active=True,
            ).order_by('name')
        self.fields['unit'].required = False


class StudentSearchForm(forms.Form):
    q = forms.CharField(required=False)
