from nft_sales_tracker.main import main

main()
