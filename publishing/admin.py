from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import Group
from django.utils.html import format_html
from django.urls import reverse
from .models import User, Article, Comment, Follow

# ==================== ADMIN CLASSES ====================

@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('username', 'name', 'email', 'is_staff', 'date_joined')
    search_fields = ('username', 'name', 'email')
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Profile', {'fields': ('name', 'bio', 'image')}),
    )
    actions = ['activate_users', 'deactivate_users']

    def activate_users(self, request, queryset):
        queryset.update(is_active=True)
        self.message_user(request, f"{queryset.count()} users activated")
    activate_users.short_description = "Activate selected users"

    def deactivate_users(self, request, queryset):
        queryset.update(is_active=False)
        self.message_user(request, f"{queryset.count()} users deactivated")
    deactivate_users.short_description = "Deactivate selected users"

    def has_delete_permission(self, request, obj=None):
        # Users are deactivated, never deleted; favorites_count counts their rows
        return False

@admin.register(Article)
class ArticleAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'author_link', 'favorites_count', 'created_at')
    search_fields = ('title', 'body', 'author__username')
    # Counter is maintained by the favorite toggle only
    readonly_fields = ('favorites_count',)

    def author_link(self, obj):
        url = reverse("admin:publishing_user_change", args=[obj.author.id])
        return format_html('<a href="{}">{}</a>', url, obj.author.username)
    author_link.short_description = 'Author'
    author_link.admin_order_field = 'author__username'

@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ('id', 'author', 'article', 'created_at', 'body_short')
    search_fields = ('body', 'author__username', 'article__id')

    def body_short(self, obj):
        return obj.body[:50] + '...' if len(obj.body) > 50 else obj.body
    body_short.short_description = 'Body'

@admin.register(Follow)
class FollowAdmin(admin.ModelAdmin):
    list_display = ('id', 'follower', 'followed', 'created_at')
    search_fields = ('follower__username', 'followed__username')

# Unregister Django's default Group
admin.site.unregister(Group)

# Basic admin site configuration
admin.site.site_header = "Blogify Admin"
admin.site.site_title = "Blogify Admin Portal"
admin.site.index_title = "Welcome"
