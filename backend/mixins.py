from rest_framework.response import Response


class SuccessDestroyMixin:
    """
    Delete through perform_destroy (where reference guards live) and answer
    {"success": true} instead of an empty 204.
    """

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        self.perform_destroy(instance)
        return Response({'success': True})
