from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'complaints'

router = DefaultRouter()
router.register(r'complaints', views.ComplaintViewSet, basename='complaint')

urlpatterns = [
    # Complaints
    # GET  /api/complaints/               - Own complaints (admin: all)
    # POST /api/complaints/               - File complaint
    # GET  /api/complaints/{id}/          - Complaint with proofs and remarks
    # POST /api/complaints/{id}/proofs/   - Attach proofs
    # POST /api/complaints/{id}/remarks/  - Add remark
    path('', include(router.urls)),

    # Admin QA
    # GET   /api/admin/qa/complaints/               - Review list (?status)
    # PATCH /api/admin/qa/complaints/{id}/status/   - Change status
    # PATCH /api/admin/qa/complaints/{id}/remarks/  - Replace admin remarks
    # POST  /api/admin/qa/complaints/{id}/refund/   - Refund coins once
    path('admin/qa/complaints/', views.admin_complaints, name='admin-complaints'),
    path('admin/qa/complaints/<uuid:complaint_id>/status/', views.admin_complaint_status, name='admin-complaint-status'),
    path('admin/qa/complaints/<uuid:complaint_id>/remarks/', views.admin_complaint_remarks, name='admin-complaint-remarks'),
    path('admin/qa/complaints/<uuid:complaint_id>/refund/', views.admin_complaint_refund, name='admin-complaint-refund'),
]
