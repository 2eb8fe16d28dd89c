from django.contrib import admin

from containers.models import Container, Item, Location

# --- Inlines ---

class ContainerInline(admin.TabularInline):
    model = Container
    extra = 0
    fields = ("code", "sku", "quantity", "status")
    readonly_fields = fields
    show_change_link = True
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


# === Location ===

@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "location_type", "container_count")
    list_filter = ("location_type",)
    search_fields = ("code", "name")
    ordering = ("code",)
    inlines = [ContainerInline]

    def container_count(self, obj):
        return obj.containers.count()
    container_count.short_description = "Containers"


# === Item ===

@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ("sku", "name", "unit_of_measurement")
    search_fields = ("sku", "name")
    ordering = ("sku",)


# === Container ===
# Статус и содержимое меняются только операциями движка (приёмка, QC, сборка...),
# в админке только просмотр.

@admin.register(Container)
class ContainerAdmin(admin.ModelAdmin):
    list_display = ("code", "sku", "quantity", "status", "location_code", "has_contents", "updated_at")
    list_filter = ("status", "location__location_type")
    search_fields = ("code", "sku", "location__code")
    readonly_fields = ("code", "sku", "quantity", "status", "location", "created_at", "updated_at")
    list_select_related = ("location",)
    ordering = ("code",)

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def location_code(self, obj):
        return obj.location.code
    location_code.short_description = "Location"

    @admin.display(boolean=True, description="Has contents")
    def has_contents(self, obj):
        return obj.has_contents
