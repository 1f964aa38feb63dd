from django.contrib import admin

# Customize admin site
admin.site.site_header = "Boarding House Administration"
admin.site.site_title = "Boarding House Admin"
admin.site.index_title = "Rooms, Tenants and Payments"
