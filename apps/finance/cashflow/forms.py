from django import forms

from .models import FixedExpense, Transaction


class OwnedModelForm(forms.ModelForm):
    def __init__(self, *args, **kwargs):
        self.owner = kwargs.pop('owner', None)
        super().__init__(*args, **kwargs)
        if self.owner and not self.instance.owner_id:
            self.instance.owner = self.owner


class TransactionForm(OwnedModelForm):
    class Meta:
        model = Transaction
        fields = ['type', 'amount', 'method', 'category', 'description', 'transaction_date']
        widgets = {
            'transaction_date': forms.DateInput(attrs={'type': 'date'}),
        }


class FixedExpenseForm(OwnedModelForm):
    class Meta:
        model = FixedExpense
        fields = ['name', 'amount', 'method', 'description']


class MonthFilterForm(forms.Form):
    month = forms.CharField(required=False, widget=forms.TextInput(attrs={'type': 'month'}))
