"""
Django admin configuration for core app.
"""
from django.contrib import admin


# Customize admin site header and title
admin.site.site_header = "MotorHub Administration"
admin.site.site_title = "MotorHub Admin"
admin.site.index_title = "Role requests and privileged accounts"
