from django.db import models
from django.conf import settings
from django.core.cache import cache
import logging

logger = logging.getLogger(__name__)

CAPABILITY_CACHE_TTL = 3600

# Capabilities granted to each stock archetype when a role is created with defaults
ARCHETYPE_CAPABILITIES = {
    'admin': (
        'timestat:view',
        'course:viewparticipants',
        'site:accessallgroups',
        'site:viewfullnames',
        'report:viewsite',
    ),
    'instructor': (
        'timestat:view',
        'course:viewparticipants',
        'site:viewfullnames',
    ),
    'learner': (
        'timestat:view',
    ),
}


def _cache_key(role_id):
    return f"role_capabilities_{role_id}"


class RoleManager(models.Manager):

    def create_with_defaults(self, name, **kwargs):
        """Create a role holding its archetype's stock capabilities"""
        role = self.create(name=name, **kwargs)
        for capability in ARCHETYPE_CAPABILITIES.get(name, ()):
            role.grant(capability)
        return role


class Role(models.Model):
    ARCHETYPES = [
        ('admin', 'Manager'),
        ('instructor', 'Instructor'),
        ('learner', 'Learner'),
        ('custom', 'Custom'),
    ]

    name = models.CharField(max_length=50, choices=ARCHETYPES)
    label = models.CharField(max_length=50, blank=True, help_text="Display label overriding the archetype name")
    is_active = models.BooleanField(default=True)

    objects = RoleManager()

    class Meta:
        ordering = ['id']
        indexes = [
            models.Index(fields=['name'], name='role_manage_name_6c2b1e_idx'),
        ]

    def __str__(self):
        return self.label or self.get_name_display()

    def capability_names(self):
        """Names of the capabilities this role grants, cached per role"""
        names = cache.get(_cache_key(self.pk))
        if names is None:
            names = frozenset(
                self.capabilities.filter(allowed=True).values_list('capability', flat=True)
            )
            cache.set(_cache_key(self.pk), names, CAPABILITY_CACHE_TTL)
        return names

    def allows(self, capability):
        return capability in self.capability_names()

    def grant(self, capability):
        role_capability, _ = RoleCapability.objects.update_or_create(
            role=self,
            capability=capability,
            defaults={'allowed': True},
        )
        return role_capability


class RoleCapability(models.Model):
    """One capability switched on or off for a role"""
    role = models.ForeignKey(Role, on_delete=models.CASCADE, related_name='capabilities')
    capability = models.CharField(max_length=100)
    allowed = models.BooleanField(default=True)

    class Meta:
        ordering = ['capability']
        unique_together = ['role', 'capability']

    def __str__(self):
        state = 'allow' if self.allowed else 'prevent'
        return f"{self.role}: {self.capability} ({state})"

    def save(self, *args, **kwargs):
        super().save(*args, **kwargs)
        cache.delete(_cache_key(self.role_id))
        logger.info(f"Capability '{self.capability}' set to {self.allowed} for role {self.role_id}")

    def delete(self, *args, **kwargs):
        role_id = self.role_id
        result = super().delete(*args, **kwargs)
        cache.delete(_cache_key(role_id))
        return result


class UserRole(models.Model):
    """Role assignment, site-wide when course is empty"""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='user_roles')
    role = models.ForeignKey(Role, on_delete=models.CASCADE, related_name='user_roles')
    course = models.ForeignKey(
        'courses.Course',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='role_assignments',
        help_text="Course the role applies to; empty for a site-wide assignment"
    )
    valid_until = models.DateTimeField(null=True, blank=True)

    class Meta:
        unique_together = ['user', 'role', 'course']
        indexes = [
            models.Index(fields=['user', 'role'], name='role_manage_user_id_4b7f0d_idx'),
        ]

    def __str__(self):
        scope = self.course.short_name if self.course_id else 'site'
        return f"{self.user.username} - {self.role} ({scope})"
