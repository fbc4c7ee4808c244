from django import forms

from .models import Invoice


class InvoiceForm(forms.ModelForm):
    class Meta:
        model = Invoice
        fields = [
            'unit_name',
            'cnpj_cpf',
            'exercise_month',
            'exercise_year',
            'document_type',
            'invoice_number',
            'issue_date',
            'due_date',
            'net_value',
            'payment_status',
            'payment_date',
            'paid_value',
        ]
        widgets = {
            'issue_date': forms.DateInput(attrs={'type': 'date'}),
            'due_date': forms.DateInput(attrs={'type': 'date'}),
            'payment_date': forms.DateInput(attrs={'type': 'date'}),
        }

    def __init__(self, *args, **kwargs):
        self.owner = kwargs.pop('owner', None)
        super().__init__(*args, **kwargs)
        if self.owner and not self.instance.owner_id:
            self.instance.owner = self.owner
