from django.contrib import admin

from . import models


class GatePassAdmin(admin.ModelAdmin):
    list_display = ('id', 'student', 'date', 'status', 'hod', 'created_at')
    list_filter = ('status', 'student__department')
    search_fields = ('student__name', 'student__roll', 'reason')
    date_hierarchy = 'created_at'
    # Decisions go through the approval API so the credential stays consistent.
    readonly_fields = ('status', 'qr_url', 'hod', 'created_at')


admin.site.register(models.GatePass, GatePassAdmin)
