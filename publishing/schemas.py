"""
Input schemas, one Django form per operation.

Forms are validated before any store access. Update forms only report the
fields actually present in the request body (``changed_fields``) so absent
keys leave stored values untouched.
"""

from django import forms
from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator

from .exceptions import InvalidInput

MAX_TAGS = 10
MAX_TAG_LENGTH = 40

username_validator = RegexValidator(
    r"^[A-Za-z0-9_]+$",
    "Username can only contain letters, numbers, and underscores."
)


class TagListField(forms.Field):
    """List of non-empty strings, kept in authored order."""

    def to_python(self, value):
        if value in (None, ""):
            return []
        if not isinstance(value, (list, tuple)):
            raise ValidationError("tagList must be a list of strings.")
        tags = []
        for tag in value:
            if not isinstance(tag, str):
                raise ValidationError("tagList must be a list of strings.")
            tag = tag.strip()
            if not tag:
                raise ValidationError("Tags cannot be empty.")
            if len(tag) > MAX_TAG_LENGTH:
                raise ValidationError(f"Tags cannot exceed {MAX_TAG_LENGTH} characters.")
            tags.append(tag)
        if len(tags) > MAX_TAGS:
            raise ValidationError(f"An article can have at most {MAX_TAGS} tags.")
        return tags


class PartialUpdateForm(forms.Form):
    """Base for PUT bodies where every field is optional."""

    # Fields that may be omitted but must not be blank when sent
    non_blank_fields = ()

    def changed_fields(self):
        return {
            name: value for name, value in self.cleaned_data.items()
            if name in self.data
        }

    def clean(self):
        cleaned = super().clean()
        for name in self.non_blank_fields:
            if name in self.data and name not in self.errors and not cleaned.get(name):
                self.add_error(name, "This field cannot be blank.")
        return cleaned


# ============================================================================
# ACCOUNTS
# ============================================================================

class RegisterForm(forms.Form):
    username = forms.CharField(min_length=3, max_length=30, validators=[username_validator])
    name = forms.CharField(max_length=150)
    email = forms.EmailField(required=False)
    password = forms.CharField(min_length=8, strip=False)

    def clean_email(self):
        return self.cleaned_data["email"].lower()


class LoginForm(forms.Form):
    # Username or email address
    username = forms.CharField(max_length=254)
    password = forms.CharField(strip=False)


class UserUpdateForm(PartialUpdateForm):
    name = forms.CharField(max_length=150, required=False)
    email = forms.EmailField(required=False)
    bio = forms.CharField(max_length=500, required=False)
    image = forms.CharField(max_length=500, required=False)
    password = forms.CharField(min_length=8, required=False, strip=False)

    non_blank_fields = ("name", "password")


# ============================================================================
# CONTENT
# ============================================================================

class ArticleForm(forms.Form):
    title = forms.CharField(max_length=255)
    description = forms.CharField(max_length=500)
    body = forms.CharField()
    tagList = TagListField(required=False)


class ArticleUpdateForm(PartialUpdateForm):
    title = forms.CharField(max_length=255, required=False)
    description = forms.CharField(max_length=500, required=False)
    body = forms.CharField(required=False)
    tagList = TagListField(required=False)

    non_blank_fields = ("title", "description", "body")


class CommentForm(forms.Form):
    body = forms.CharField(max_length=5000)


def validate(form_class, data):
    """Bind ``data`` to ``form_class``; return the valid form or raise InvalidInput."""
    form = form_class(data)
    if not form.is_valid():
        raise InvalidInput.from_form(form)
    return form
