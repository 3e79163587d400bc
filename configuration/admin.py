from django import forms
from django.contrib import admin
from .models import PlatformConfig
from .store import PlatformConfigStore


class PlatformConfigForm(forms.ModelForm):
    class Meta:
        model = PlatformConfig
        fields = ['key', 'value', 'description']

    def clean(self):
        cleaned_data = super().clean()
        key = cleaned_data.get('key')
        value = cleaned_data.get('value')
        if key and value is not None:
            try:
                cleaned_data['value'] = PlatformConfigStore.validate_value(key, value)
            except ValueError as e:
                self.add_error('value', str(e))
        return cleaned_data


@admin.register(PlatformConfig)
class PlatformConfigAdmin(admin.ModelAdmin):
    form = PlatformConfigForm
    list_display = ['key', 'value', 'description', 'updated_at']
    search_fields = ['key', 'description']
    readonly_fields = ['updated_at']
