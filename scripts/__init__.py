#Offline tooling: mock delivery data generation and the earnings report runner.
#No business logic here; scripts call into pricing / orders / earnings.
