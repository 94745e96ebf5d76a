"""User-facing messages.

The product is used by Thai-speaking staff, so every message returned to a
client is Thai. Error codes stay English and are the stable contract.
"""

# Authentication / authorization
UNAUTHENTICATED = "ไม่ได้รับอนุญาต - กรุณาเข้าสู่ระบบ"
ADMIN_REQUIRED = "ไม่ได้รับอนุญาต - ต้องเป็น Admin เท่านั้น"
EMPLOYEE_REQUIRED = "เฉพาะพนักงานเท่านั้นที่สามารถลงเวลาได้"
ACCOUNT_INACTIVE = "บัญชีผู้ใช้ถูกปิดการใช้งาน"

# Generic
VALIDATION_FAILED = "ข้อมูลไม่ถูกต้อง"
INVALID_UUID = "รูปแบบ {field} ไม่ถูกต้อง"
MISSING_FIELDS = "กรุณากรอกข้อมูลให้ครบถ้วน: {fields}"
INTERNAL_ERROR = "เกิดข้อผิดพลาดภายในระบบ"
RATE_LIMITED = "คำขอมากเกินไป กรุณาลองใหม่ในภายหลัง"
AMOUNT_TOO_LARGE = "จำนวนเงินต้องไม่เกิน 9,999,999,999.99 บาท"

# Payroll cycles
CYCLE_REQUIRED_FIELDS = "กรุณากรอกข้อมูลให้ครบถ้วน: ชื่อรอบ วันที่เริ่มต้น วันที่สิ้นสุด"
CYCLE_INVALID_DATE_RANGE = "วันที่เริ่มต้นต้องน้อยกว่าวันที่สิ้นสุด"
CYCLE_OVERLAP = "ช่วงวันที่ทับซ้อนกับรอบการจ่ายเงินเดือนที่มีอยู่แล้ว"
CYCLE_DUPLICATE_NAME = "ชื่อรอบการจ่ายเงินเดือนนี้มีอยู่แล้ว"
CYCLE_CREATED = "สร้างรอบการจ่ายเงินเดือนเรียบร้อยแล้ว"
CYCLE_NOT_FOUND = "ไม่พบรอบการจ่ายเงินเดือนที่ระบุ"
CYCLE_NOT_ACTIVE = "รอบการจ่ายเงินเดือนนี้ไม่อยู่ในสถานะที่สามารถดำเนินการได้"
CYCLE_ALREADY_COMPLETED = "รอบการจ่ายเงินเดือนนี้ได้ถูกปิดแล้ว"
CYCLE_ALREADY_CALCULATED = "การคำนวณเงินเดือนสำหรับรอบนี้ได้ทำไปแล้ว"
CYCLE_NO_ELIGIBLE_EMPLOYEES = "ไม่พบพนักงานที่มีอัตราค่าจ้างสำหรับคำนวณเงินเดือน"
CYCLE_CALCULATED = "คำนวณเงินเดือนเรียบร้อยแล้ว"
CYCLE_RESET = "รีเซ็ตการคำนวณเงินเดือนเรียบร้อยแล้ว"
CYCLE_SUMMARY = "ดึงข้อมูลสรุปรอบการจ่ายเงินเดือนเรียบร้อยแล้ว"
CYCLE_FINALIZED = "ปิดรอบการจ่ายเงินเดือนเรียบร้อยแล้ว"
CYCLE_HAS_NEGATIVE_NET_PAY = "ไม่สามารถปิดรอบได้ มีพนักงานที่มีเงินเดือนสุทธิติดลบ"
CYCLE_HAS_MISSING_DATA = "ไม่สามารถปิดรอบได้ มีข้อมูลพนักงานไม่ครบถ้วน"
CYCLE_EXPORTED = "ส่งออกข้อมูลเงินเดือนเรียบร้อยแล้ว"
EXPORT_INVALID_FORMAT = "รูปแบบการส่งออกไม่ถูกต้อง (รองรับ csv หรือ json)"

# Payroll details
DETAIL_NOT_FOUND = "ไม่พบข้อมูลเงินเดือนที่ระบุ"
BONUS_ON_COMPLETED_CYCLE = "ไม่สามารถแก้ไขโบนัสในรอบที่ปิดแล้ว"
DEDUCTION_ON_COMPLETED_CYCLE = "ไม่สามารถแก้ไขการหักเงินในรอบที่ปิดแล้ว"
BONUS_NEGATIVE = "จำนวนโบนัสต้องเป็นตัวเลขที่ไม่ติดลบ"
DEDUCTION_NEGATIVE = "จำนวนการหักเงินต้องเป็นตัวเลขที่ไม่ติดลบ"
BONUS_REASON_REQUIRED = "กรุณาระบุเหตุผลในการให้โบนัส"
DEDUCTION_REASON_REQUIRED = "กรุณาระบุเหตุผลในการหักเงิน"
REASON_TOO_LONG = "เหตุผลต้องไม่เกิน {max_length} ตัวอักษร"
NET_PAY_NEGATIVE = "เงินเดือนสุทธิไม่สามารถติดลบได้"
BONUS_UPDATED = "อัปเดตโบนัสเรียบร้อยแล้ว"
BONUS_REMOVED = "ลบโบนัสเรียบร้อยแล้ว"
DEDUCTION_UPDATED = "อัปเดตการหักเงินเรียบร้อยแล้ว"
DEDUCTION_REMOVED = "ลบการหักเงินเรียบร้อยแล้ว"

# Time entries
ALREADY_CHECKED_IN = "คุณได้ลงเวลาเข้างานแล้ว กรุณาลงเวลาออกก่อน"
NOT_CHECKED_IN = "ไม่พบการลงเวลาเข้างานที่ยังไม่ได้ลงเวลาออก"
BRANCH_NOT_FOUND = "ไม่พบสาขาที่ระบุ"
TOO_FAR_FROM_BRANCH = "คุณอยู่ห่างจากสาขาเกิน {max_distance:.0f} เมตร (ระยะทาง {distance:.0f} เมตร)"
INVALID_COORDINATES = "พิกัด GPS ไม่ถูกต้อง"
SELFIE_NOT_OWNED = "ไม่สามารถใช้รูปเซลฟี่ของผู้ใช้อื่นได้"
CHECKED_IN = "ลงเวลาเข้างานเรียบร้อยแล้ว"
CHECKED_OUT = "ลงเวลาออกงานเรียบร้อยแล้ว"

# Sales reports
EMPLOYEE_ACCESS_REQUIRED = "ต้องมีสิทธิ์พนักงานเท่านั้น"
SALES_CHECK_IN_REQUIRED = "กรุณาเช็คอินที่สาขาก่อนทำการรายงานยอดขาย"
SALES_REQUIRED_FIELDS = "ข้อมูลไม่ครบถ้วน: กรุณากรอกยอดขายและแนบรูปภาพสลิป"
SALES_AMOUNT_INVALID = "ยอดขายต้องเป็นตัวเลขบวกเท่านั้น และไม่เกิน 12 หลัก"
SALES_SLIP_NOT_OWNED = "ไม่สามารถใช้รูปสลิปของผู้ใช้อื่นได้"
SALES_ALREADY_REPORTED = "คุณได้ทำการรายงานยอดขายของวันนี้แล้ว กรุณาตรวจสอบในประวัติการรายงาน"
SALES_REPORTED = "บันทึกรายงานยอดขายสำเร็จ ยอดขายรวม: ฿{total_sales:,.2f}"

# Material usage
MATERIALS_REQUIRED = "กรุณาเลือกวัตถุดิบอย่างน้อย 1 รายการ"
MATERIAL_QUANTITY_INVALID = "จำนวนต้องเป็นตัวเลขบวกเท่านั้น"
MATERIAL_CHECK_IN_REQUIRED = "ไม่พบการเช็คอินที่ยังไม่ได้เช็คเอาท์ กรุณาเช็คอินก่อนรายงานการใช้วัตถุดิบ"
MATERIAL_NOT_FOUND = "วัตถุดิบที่เลือกไม่ถูกต้อง"
NO_ACTIVE_SESSION = "ไม่พบการเช็คอินที่ยังไม่ได้เช็คเอาท์"

# Reports
INVALID_DATE_RANGE_FILTER = "ช่วงเวลาไม่ถูกต้อง"

NO_BRANCH_NAME = "ไม่มีสาขา"
