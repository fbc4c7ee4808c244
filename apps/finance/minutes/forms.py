from django import forms

from .models import MeetingMinute


class MeetingMinuteForm(forms.ModelForm):
    class Meta:
        model = MeetingMinute
        fields = ['title', 'header_text', 'logo_url', 'meeting_date', 'content']
        widgets = {
            'header_text': forms.Textarea(attrs={'rows': 2}),
            'content': forms.Textarea(attrs={'rows': 14}),
            'meeting_date': forms.DateInput(attrs={'type': 'date'}),
        }

    def __init__(self, *args, **kwargs):
        self.owner = kwargs.pop('owner', None)
        super().__init__(*args, **kwargs)
        if self.owner and not self.instance.owner_id:
            self.instance.owner = self.owner
