"""WTForms used to validate JSON request bodies."""

def form_errors(form):
    """Flatten a form's errors into ``{field: first message}``."""
    return {field: messages[0] for field, messages in form.errors.items() if messages}
