from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _


# ===== Начало блока "Справочники" =====


# === Локации: доки, линии, ячейки стеллажей ===
class Location(models.Model):
    class LocationType(models.TextChoices):
        DOCK = 'dock', _('Receiving dock')          # зона приёмки
        LINE = 'line', _('Assembly line')           # сборочная линия
        SHELF = 'shelf', _('Shelf')                 # ячейка стеллажа
        STAGING = 'staging', _('Staging area')      # буфер

    code = models.CharField(max_length=64, unique=True)  # сканируемый код: A-01-01, RECEIVING, ASSEMBLY-LINE-1
    name = models.CharField(max_length=120, blank=True)
    location_type = models.CharField(
        max_length=16,
        choices=LocationType.choices,
        default=LocationType.SHELF,
        db_index=True,
    )

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['code']

    def __str__(self):
        return self.code


# === Номенклатура: SKU -> отображаемое имя материала ===
class Item(models.Model):
    sku = models.CharField(max_length=64, unique=True)
    name = models.CharField(max_length=255)
    unit_of_measurement = models.CharField(max_length=16, default="pcs")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['sku']

    def __str__(self):
        return f"{self.sku}: {self.name}"


# ===== Конец блока "Справочники" =====





# ===== Начало блока "Тара" =====


# === Тара (контейнеры) ===
class Container(models.Model):

    class Status(models.TextChoices):
        IDLE = 'Idle', _('Idle')
        PENDING_QC = 'Pending_QC', _('Pending QC')
        STORED = 'Stored', _('Stored')
        QC_HOLD = 'QC_Hold', _('QC hold')
        IN_TRANSIT = 'In_Transit', _('In transit')
        EMPTY = 'Empty', _('Empty')  # транзитное состояние, только в ходе сборки

    # Статусы, в которых у тары нет содержимого
    CONTENTLESS = (Status.IDLE, Status.EMPTY)

    code = models.CharField(max_length=64, unique=True)
    sku = models.CharField(max_length=64, null=True, blank=True)
    quantity = models.PositiveIntegerField(null=True, blank=True)

    # null допускается только для старых записей, движок его не пишет
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        null=True,
        blank=True,
        db_index=True,
    )
    location = models.ForeignKey(
        'Location',
        on_delete=models.PROTECT,
        related_name='containers',
        db_index=True,
    )

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['code']
        indexes = [
            models.Index(fields=['status', 'location'], name='container_status_loc_idx'),
        ]
        constraints = [
            # Idle/Empty без содержимого; остальные статусы с sku и количеством
            models.CheckConstraint(
                condition=(
                    Q(status__in=['Idle', 'Empty'], sku__isnull=True, quantity__isnull=True)
                    | (Q(sku__isnull=False, quantity__isnull=False) & ~Q(status__in=['Idle', 'Empty']))
                    | Q(status__isnull=True)
                ),
                name='container_contents_match_status',
            ),
        ]

    @property
    def has_contents(self) -> bool:
        return self.sku is not None and self.quantity is not None

    def __str__(self):
        return f"{self.code} ({self.status or '-'} @ {self.location.code})"


# ===== Конец блока "Тара" =====
